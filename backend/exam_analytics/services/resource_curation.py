"""
Study Resource Curation

Builds the resources attached to recommendations and tiers the full set for
the learner:

- essential: resources attached to critical/high-priority recommendations
- advanced: remaining resources with advanced difficulty
- supplementary: everything else, plus a default set per analysed component

Each tier is deduplicated by (title, component); the per-component breakdown
is drawn from the deduplicated tiers.
"""

from typing import Iterable

from exam_analytics.enums.analytics import (
    RecommendationDifficulty,
    RecommendationPriority,
    ResourceCost,
    ResourceType,
)
from exam_analytics.enums.exam import ALL_COMPONENTS, Component
from exam_analytics.models.recommendations import (
    CuratedResources,
    StudyRecommendation,
    StudyResource,
)
from exam_analytics.models.weakness import WeaknessDetail

ESSENTIAL_PRIORITIES = (RecommendationPriority.CRITICAL, RecommendationPriority.HIGH)


def weakness_resources(weakness: WeaknessDetail) -> list[StudyResource]:
    """Targeted exercises for one weakness."""
    return [
        StudyResource(
            type=ResourceType.EXERCISE,
            title=f"{weakness.component.value.capitalize()} Practice Exercises",
            description=f"Targeted exercises for {weakness.specific_area}",
            estimated_time_minutes=30,
            difficulty=RecommendationDifficulty.INTERMEDIATE,
            component=weakness.component,
            skills=[weakness.specific_area],
            is_interactive=True,
            cost=ResourceCost.FREE,
            rating=4,
        )
    ]


def foundation_resources() -> list[StudyResource]:
    """The broad course attached to the foundation-building plan."""
    return [
        StudyResource(
            type=ResourceType.TUTORIAL,
            title="Foundation Building Course",
            description="Comprehensive foundation course covering all components",
            estimated_time_minutes=480,
            difficulty=RecommendationDifficulty.BEGINNER,
            component=Component.READING,
            skills=["fundamentals", "basics"],
            is_interactive=True,
            cost=ResourceCost.FREE,
            rating=5,
        )
    ]


def component_resources(component: Component) -> list[StudyResource]:
    """Default practice set for one component."""
    return [
        StudyResource(
            type=ResourceType.EXERCISE,
            title=f"{component.value.capitalize()} Exercises",
            description=f"Practice exercises for {component.value} skills",
            estimated_time_minutes=45,
            difficulty=RecommendationDifficulty.INTERMEDIATE,
            component=component,
            skills=[f"{component.value}_skills"],
            is_interactive=True,
            cost=ResourceCost.FREE,
            rating=4,
        )
    ]


def deduplicate_resources(resources: Iterable[StudyResource]) -> list[StudyResource]:
    """Keep the first resource per (title, component), preserving order."""
    seen: set[tuple[str, Component]] = set()
    unique = []
    for resource in resources:
        key = (resource.title, resource.component)
        if key in seen:
            continue
        seen.add(key)
        unique.append(resource)
    return unique


def curate_resources(
    recommendations: Iterable[StudyRecommendation],
    components: Iterable[Component],
) -> CuratedResources:
    """
    Tier the resources of a recommendation set.

    Args:
        recommendations: Filtered recommendations.
        components: Components present in the analytics breakdown; each
            contributes its default resources to the supplementary tier.

    Returns:
        CuratedResources with a breakdown entry for every component.
    """
    essential: list[StudyResource] = []
    supplementary: list[StudyResource] = []
    advanced: list[StudyResource] = []

    for recommendation in recommendations:
        for resource in recommendation.resources:
            if recommendation.priority in ESSENTIAL_PRIORITIES:
                essential.append(resource)
            elif resource.difficulty == RecommendationDifficulty.ADVANCED:
                advanced.append(resource)
            else:
                supplementary.append(resource)

    for component in components:
        supplementary.extend(component_resources(component))

    essential = deduplicate_resources(essential)
    supplementary = deduplicate_resources(supplementary)
    advanced = deduplicate_resources(advanced)

    pooled = [*essential, *supplementary, *advanced]
    breakdown = {
        component: [r for r in pooled if r.component == component]
        for component in ALL_COMPONENTS
    }

    return CuratedResources(
        essential=essential,
        supplementary=supplementary,
        advanced=advanced,
        category_breakdown=breakdown,
    )
