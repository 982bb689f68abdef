"""
Test suite for nodeclean.

Run all tests:
    pytest tests/ -v

Run specific test suites:
    pytest tests/test_storeconfigs.py -v   # stored-configuration cleanup and unexport
    pytest tests/test_decommission.py -v   # orchestration and failure policies
    pytest -m cli -v                       # command line
"""
