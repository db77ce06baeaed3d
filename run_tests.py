import sys, os, unittest
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Runs every test module under tests/ and prints a PASS/FAIL summary.
suite = unittest.defaultTestLoader.discover(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "tests"),
)
result = unittest.TextTestRunner(verbosity=2).run(suite)

failed = len(result.failures) + len(result.errors)
passed = result.testsRun - failed - len(result.skipped)
print("---")
print("TOTAL: " + str(passed) + " passed, " + str(failed) + " failed")
sys.exit(0 if result.wasSuccessful() else 1)
