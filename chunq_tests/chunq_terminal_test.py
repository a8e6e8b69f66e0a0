import numpy as np
import pandas as pd
import suite
from collections import namedtuple
from chunq import C, from_generator, empty

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

Person = namedtuple('Person', ['name', 'age', 'city'])

people = C(
    [Person('alice', 25, 'nyc'), Person('bob', 30, 'la')],
    [Person('charlie', 25, 'nyc'), Person('diana', 35, 'chicago')],
    [Person('eve', 28, 'la')],
)


def counting_source():
    pulled = []

    def chunk_iter():
        for index, chunk in enumerate(([1, 2], [3, 4], [5, 6])):
            pulled.append(index)
            yield chunk

    return from_generator(chunk_iter), pulled


@test("to.list and to.chunks mirror collect and collect_chunks")
def test_to_list_and_chunks():
    seq = C([1, 2], [3])
    assert_that(seq.to.list() == seq.collect() == [1, 2, 3], "to.list() should flatten")
    assert_that(seq.to.chunks() == seq.collect_chunks() == [[1, 2], [3]], "to.chunks() should keep chunks")


@test("array conversion returns a numpy array")
def test_to_array():
    result = C([1, 2], [3]).map(lambda x: x * 2).to.array()
    assert_that(isinstance(result, np.ndarray), f"should be ndarray: {type(result)}")
    assert_that(result.tolist() == [2, 4, 6], f"array contents: {result}")


@test("series conversion returns a pandas series")
def test_to_series():
    result = people.map(lambda p: p.age).to.series()
    assert_that(isinstance(result, pd.Series), "should be a Series")
    assert_that(result.sum() == 143, f"sum of ages: {result.sum()}")


@test("dataframe conversion builds one row per element")
def test_to_df():
    df = people.map(lambda p: p._asdict()).to.df()
    assert_that(isinstance(df, pd.DataFrame), "should be a DataFrame")
    assert_that(len(df) == 5, f"five rows: {len(df)}")
    assert_that(list(df.columns) == ['name', 'age', 'city'], f"columns: {list(df.columns)}")


@test("count counts elements, optionally with a predicate")
def test_count():
    assert_that(people.to.count() == 5, "five people")
    assert_that(people.to.count(lambda p: p.city == 'nyc') == 2, "two in nyc")
    assert_that(empty().to.count() == 0, "empty has none")


@test("chunk_count counts emitted chunks")
def test_chunk_count():
    assert_that(people.to.chunk_count() == 3, "three chunks")
    assert_that(people.filter(lambda p: p.age > 29).to.chunk_count() == 2, "one chunk filtered away")


@test("first returns the first element or the first match")
def test_first():
    assert_that(people.to.first().name == 'alice', "first element")
    assert_that(people.to.first(lambda p: p.age > 30).name == 'diana', "first match")


@test("first raises on empty or no match")
def test_first_errors():
    assert_raises(ValueError, empty().to.first)
    assert_raises(ValueError, people.to.first, lambda p: p.age > 100)


@test("first_or_default falls back to the default")
def test_first_or_default():
    assert_that(people.to.first_or_default(lambda p: p.age > 100) is None, "default None")
    assert_that(empty().to.first_or_default(default=-1) == -1, "explicit default")
    assert_that(people.to.first_or_default().name == 'alice', "found element wins")


@test("first stops pulling once it has an answer")
def test_first_is_short_circuit():
    seq, pulled = counting_source()
    assert_that(seq.to.first(lambda x: x > 2) == 3, "first element above 2")
    assert_that(pulled == [0, 1], f"third chunk never pulled: {pulled}")


@test("elements yields single elements lazily")
def test_elements_lazy():
    seq, pulled = counting_source()
    it = seq.to.elements()
    assert_that([next(it), next(it)] == [1, 2], "first chunk's elements")
    assert_that(pulled == [0], "only one chunk pulled so far")
    assert_that(next(it) == 3 and pulled == [0, 1], "next chunk pulled on demand")


if __name__ == "__main__":
    suite.run(title="chunq terminal accessor test suite")
