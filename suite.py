import time
import traceback
from functools import wraps
from typing import List, Dict, Any, Callable, Optional, Type

_suite_state: Dict[str, List[Dict[str, Any]]] = {
    'tests': [],
    'results': []
}


class _c:
    """terminal colour codes for the report."""
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


# --- custom exception for assertions ---

class SuiteAssertionError(AssertionError):
    """raised by assert_that so that a failed check is reported apart from a crash."""
    pass

# --- public api ---

def test(description: str) -> Callable:
    """registers a function as a test case. the function stays callable, so pytest can collect it too."""

    def decorator(func: Callable) -> Callable:
        _suite_state['tests'].append({'func': func, 'description': description, 'module': func.__module__})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise SuiteAssertionError(message)


def assert_raises(expected: Type[BaseException], func: Callable, *args, **kwargs) -> BaseException:
    """calls func and checks it raises `expected`. returns the exception for further checks."""
    try:
        func(*args, **kwargs)
    except expected as e:
        return e
    except Exception as e:
        raise SuiteAssertionError(
            f"expected {expected.__name__}, got {type(e).__name__}: {e}") from e
    raise SuiteAssertionError(f"expected {expected.__name__}, nothing was raised")


def run(title: str = "test run", verbose: bool = False, module: Optional[str] = None) -> int:
    """
    executes registered tests and prints a report. pass `module` to run only the tests
    defined in that module. returns the number of failures.
    """
    print(f"\n{_c.info}== {title} =={_c.reset}")
    start_time = time.perf_counter()

    selected = [t for t in _suite_state['tests'] if module is None or t['module'] == module]
    results = []

    for test_item in selected:
        error = None
        started = time.perf_counter()
        try:
            test_item['func']()
        except SuiteAssertionError as e:
            error = f"assertion failed: {e}"
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            if verbose:
                traceback.print_exc()
        elapsed = (time.perf_counter() - started) * 1000

        results.append({'passed': error is None, 'description': test_item['description'], 'error': error})
        if error is None:
            print(f"  {_c.ok}ok  {_c.reset} {test_item['description']} {_c.grey}({elapsed:.1f}ms){_c.reset}")
        else:
            print(f"  {_c.fail}FAIL{_c.reset} {test_item['description']}")
            print(f"       {_c.grey}{error}{_c.reset}")

    _suite_state['results'] = results
    failed = _print_summary(start_time, results)

    # drop what ran so another suite in the same process starts clean
    _suite_state['tests'] = [t for t in _suite_state['tests'] if t not in selected]
    return failed


def _print_summary(start_time: float, results: List[Dict[str, Any]]) -> int:
    duration = (time.perf_counter() - start_time) * 1000
    total = len(results)
    failed_count = sum(1 for r in results if not r['passed'])
    colour = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{colour}{total - failed_count}/{total} passed{_c.reset}"
          f" in {_c.warn}{duration:.2f}ms{_c.reset}")
    for r in results:
        if not r['passed']:
            print(f"  {_c.fail}- {r['description']}{_c.reset}")
    return failed_count
