import suite
from chunq import C, Sequence, IChunkSource, TransformSequence, SortKey

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises


class ForwardingSequence(Sequence):
    """a subclass that defers to the abstract contract"""

    def produce(self):
        return super().produce()


def explode_on(bad):
    def transform(x):
        if x == bad:
            raise KeyError(f"bad element {x}")
        return x
    return transform


@test("the abstract sequence cannot be instantiated")
def test_abstract_base():
    assert_raises(TypeError, Sequence)
    assert_raises(TypeError, IChunkSource)


@test("calling the abstract produce raises NotImplementedError")
def test_unimplemented_produce():
    seq = ForwardingSequence()
    err = assert_raises(NotImplementedError, seq.collect)
    assert_that('ForwardingSequence' in str(err), f"message names the class: {err}")


@test("a failing transform propagates its own exception type")
def test_transform_failure_propagates():
    err = assert_raises(KeyError, C([1, 2], [3]).map(explode_on(3)).collect)
    assert_that('bad element 3' in str(err), f"original message kept: {err}")


@test("a failing predicate propagates from filter")
def test_predicate_failure_propagates():
    seq = C([1, 2, 0]).filter(lambda x: 10 / x > 1)
    assert_raises(ZeroDivisionError, seq.collect_chunks)


@test("a failing key extractor propagates from order_by and merge")
def test_key_failure_propagates():
    assert_raises(KeyError, C([{'a': 1}, {}]).order_by(lambda d: d['a']).collect)
    assert_raises(KeyError, C([{'a': 1}]).merge(C([{}]), keys=[lambda d: d['a']]).collect)


@test("chunks pulled before a failure stay valid and no partial chunk is emitted")
def test_partial_results_survive_failure():
    it = iter(C([1, 2], [3, 4], [5]).map(explode_on(4)))
    received = [next(it)]
    assert_raises(KeyError, next, it)
    assert_that(received == [[1, 2]], f"earlier chunk intact: {received}")


@test("an iterator that failed is finished")
def test_failed_iterator_is_finished():
    it = iter(C([1], [2], [3]).map(explode_on(2)))
    next(it)
    assert_raises(KeyError, next, it)
    assert_that(next(it, None) is None, "no further chunks after the failure")


@test("a fresh pass over a re-iterable source fails again at the same point")
def test_fresh_pass_after_failure():
    seq = C([1], [2]).map(explode_on(2))
    assert_raises(KeyError, seq.collect)
    it = iter(seq)
    assert_that(next(it) == [1], "a new pass restarts from the source")
    assert_raises(KeyError, next, it)


@test("failures surface even after an ordering stage buffered everything")
def test_failure_after_ordering():
    seq = C([3, 1], [2]).order_by(lambda x: x).map(explode_on(2))
    assert_raises(KeyError, seq.collect)


@test("transform sequence validates its arguments")
def test_transform_construction_errors():
    assert_raises(ValueError, TransformSequence, C([1]), lambda x: x, 'reduce')
    assert_raises(TypeError, C([1]).map, 5)
    assert_raises(TypeError, C([1]).filter, None)


@test("sort keys validate and describe themselves")
def test_sort_key_records():
    def age(p):
        return p['age']

    key = SortKey.coerce((age, True))
    assert_that(key.descending and key.selector is age, "pair coerced")
    assert_that(SortKey.coerce(key) is key, "records pass through")
    assert_that(SortKey.coerce(age) == SortKey(age, False), "bare selector is ascending")
    assert_that(repr(key) == "SortKey(selector=age, descending=True)", f"repr: {key!r}")
    assert_raises(TypeError, SortKey, 42)


if __name__ == "__main__":
    suite.run(title="chunq error handling test suite")
