#!/usr/bin/env python3

import unittest
import sys
import os

def _extract_test_cases(test):
    for t in test:
        if isinstance(t, unittest.TestSuite):
            yield from _extract_test_cases(t)
        else:
            yield t

def run_tests(test_name=None):
    # Tests live beside the code in the srch package
    current_dir = os.path.dirname(os.path.abspath(__file__))
    start_dir = os.path.join(current_dir, "srch")

    loader = unittest.TestLoader()
    suite = loader.discover(start_dir, pattern='*_unittest.py', top_level_dir=current_dir)

    if test_name:
        # Keep only the tests whose id mentions the given name
        filtered = unittest.TestSuite()
        for test_case in _extract_test_cases(suite):
            if test_name.lower() in test_case.id().lower():
                filtered.addTest(test_case)
        suite = filtered

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    # Return 0 if tests passed, 1 if any failed
    return 0 if result.wasSuccessful() else 1

if __name__ == '__main__':
    test_name = sys.argv[1] if len(sys.argv) > 1 else None
    sys.exit(run_tests(test_name))
