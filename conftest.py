from pprint import pprint

from pytest import fixture

from memosearch.search.memo import MemoTable
from memosearch.search.problem import TransitionProblem


@fixture(autouse=True)
def add_doctest_imports(doctest_namespace):
    doctest_namespace["pprint"] = pprint
    doctest_namespace["MemoTable"] = MemoTable
    doctest_namespace["TransitionProblem"] = TransitionProblem
