"""
Exam Analytics Engine

Pure, deterministic analytics for adaptive exam preparation:
- Readiness Scoring (services.readiness)
- Weakness Detection (services.weakness_detection)
- Recommendation Synthesis (services.recommendation_engine)

Usage:
    from exam_analytics.services import create_pipeline

    report = create_pipeline().run_sync(progress, sessions)
"""

__version__ = "0.1.0"
