"""
Exam Analytics Test Suite

Test Structure:
    tests/
    ├── conftest.py                      # Learner snapshot factories and fixtures
    └── unit/                            # Unit tests (pure computation, no services)
        ├── test_statistics.py           # Shared numeric and DataFrame helpers
        ├── test_readiness.py            # Readiness scoring
        ├── test_weakness_detection.py   # Weakness detectors and aggregation
        ├── test_recommendation_engine.py  # Rules, ranking, partitioning
        ├── test_study_plan.py           # Plan, schedule, insights, prediction
        ├── test_pipeline.py             # Orchestrator and factory
        ├── test_config.py               # Engine config, YAML and settings
        └── test_models.py               # Input/result models and errors

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run one module
    pytest backend/tests/unit/test_readiness.py -v
"""
