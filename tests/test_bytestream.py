import random

import pytest

from netpipe.bytestream import ByteStream


def check(bs, *, closed, empty, finished, popped, pushed, available, buffered, peek=None):
    assert bs.is_closed() is closed
    assert (bs.bytes_buffered() == 0) is empty
    assert bs.is_finished() is finished
    assert bs.bytes_popped() == popped
    assert bs.bytes_pushed() == pushed
    assert bs.available_capacity() == available
    assert bs.bytes_buffered() == buffered
    if peek is not None:
        assert bs.peek() == peek


def assert_all_zeroes(bs):
    assert bs.bytes_buffered() == 0
    assert bs.available_capacity() == 15
    assert bs.bytes_pushed() == 0
    assert bs.bytes_popped() == 0


# basics


def test_construction():
    bs = ByteStream(15)
    assert bs.is_closed() is False
    assert bs.is_finished() is False
    assert bs.has_error() is False
    assert_all_zeroes(bs)


def test_close():
    bs = ByteStream(15)
    bs.close()
    assert bs.is_closed() is True
    assert bs.is_finished() is True
    assert bs.has_error() is False
    assert_all_zeroes(bs)


def test_set_error():
    bs = ByteStream(15)
    bs.set_error()
    assert bs.is_closed() is False
    assert bs.is_finished() is False
    assert bs.has_error() is True
    assert_all_zeroes(bs)


def test_first_peek():
    assert ByteStream(15).peek() == b""


# capacity


def test_overwrite():
    bs = ByteStream(2)
    bs.push(b"cat")
    state = dict(closed=False, empty=False, finished=False, popped=0, pushed=2,
                 available=0, buffered=2, peek=b"ca")
    check(bs, **state)
    bs.push(b"t")
    check(bs, **state)


def test_overwrite_clear_overwrite():
    bs = ByteStream(2)
    bs.push(b"cat")
    assert bs.bytes_pushed() == 2
    bs.pop(2)
    bs.push(b"tac")
    check(bs, closed=False, empty=False, finished=False, popped=2, pushed=4,
          available=0, buffered=2, peek=b"ta")


def test_overwrite_pop_overwrite():
    bs = ByteStream(2)
    bs.push(b"cat")
    assert bs.bytes_pushed() == 2
    bs.pop(1)
    bs.push(b"tac")
    check(bs, closed=False, empty=False, finished=False, popped=1, pushed=3,
          available=0, buffered=2, peek=b"at")


def test_peeks():
    bs = ByteStream(2)
    for _ in range(5):
        bs.push(b"")
    bs.push(b"cat")
    for _ in range(5):
        bs.push(b"")
    assert bs.peek() == b"ca"
    assert bs.peek() == b"ca"
    assert bs.bytes_buffered() == 2
    assert bs.peek() == b"ca"
    assert bs.peek() == b"ca"
    bs.pop(1)
    for _ in range(3):
        bs.push(b"")
    assert bs.peek() == b"a"
    assert bs.peek() == b"a"
    assert bs.bytes_buffered() == 1


def test_push_reports_accepted_count():
    bs = ByteStream(2)
    assert bs.push(b"cat") == 2
    assert bs.push(b"t") == 0


# one write


def test_write_end_pop():
    bs = ByteStream(15)
    bs.push(b"cat")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.close()
    check(bs, closed=True, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.pop(3)
    check(bs, closed=True, empty=True, finished=True, popped=3, pushed=3,
          available=15, buffered=0)


def test_write_pop_end():
    bs = ByteStream(15)
    bs.push(b"cat")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.pop(3)
    check(bs, closed=False, empty=True, finished=False, popped=3, pushed=3,
          available=15, buffered=0)
    bs.close()
    check(bs, closed=True, empty=True, finished=True, popped=3, pushed=3,
          available=15, buffered=0, peek=b"")


def test_write_pop2_end():
    bs = ByteStream(15)
    bs.push(b"cat")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.pop(1)
    check(bs, closed=False, empty=False, finished=False, popped=1, pushed=3,
          available=13, buffered=2, peek=b"at")
    bs.pop(2)
    check(bs, closed=False, empty=True, finished=False, popped=3, pushed=3,
          available=15, buffered=0)
    bs.close()
    check(bs, closed=True, empty=True, finished=True, popped=3, pushed=3,
          available=15, buffered=0)


# two writes


def test_write_write_end_pop_pop():
    bs = ByteStream(15)
    bs.push(b"cat")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.push(b"tac")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=6,
          available=9, buffered=6, peek=b"cattac")
    bs.close()
    check(bs, closed=True, empty=False, finished=False, popped=0, pushed=6,
          available=9, buffered=6, peek=b"cattac")
    bs.pop(2)
    check(bs, closed=True, empty=False, finished=False, popped=2, pushed=6,
          available=11, buffered=4, peek=b"ttac")
    bs.pop(4)
    check(bs, closed=True, empty=True, finished=True, popped=6, pushed=6,
          available=15, buffered=0)


def test_write_pop_write_end_pop():
    bs = ByteStream(15)
    bs.push(b"cat")
    check(bs, closed=False, empty=False, finished=False, popped=0, pushed=3,
          available=12, buffered=3, peek=b"cat")
    bs.pop(2)
    check(bs, closed=False, empty=False, finished=False, popped=2, pushed=3,
          available=14, buffered=1, peek=b"t")
    bs.push(b"tac")
    check(bs, closed=False, empty=False, finished=False, popped=2, pushed=6,
          available=11, buffered=4, peek=b"ttac")
    bs.close()
    check(bs, closed=True, empty=False, finished=False, popped=2, pushed=6,
          available=11, buffered=4, peek=b"ttac")
    bs.pop(4)
    check(bs, closed=True, empty=True, finished=True, popped=6, pushed=6,
          available=15, buffered=0)


# many writes


def test_many_writes():
    rng = random.Random(144)
    nreps, min_write, max_write = 1000, 10, 200
    capacity = max_write * nreps
    bs = ByteStream(capacity)
    acc = 0
    for _ in range(nreps):
        size = min_write + rng.randrange(max_write - min_write)
        data = bytes(rng.randrange(ord("a"), ord("a") + 26) for _ in range(size))
        bs.push(data)
        acc += size
        check(bs, closed=False, empty=False, finished=False, popped=0, pushed=acc,
              available=capacity - acc, buffered=acc)


# stress


@pytest.mark.parametrize(
    "input_len, capacity, seed",
    [(19, 3, 10110), (18, 17, 12345), (1111, 17, 98765), (4097, 4096, 11101)],
)
def test_stress(input_len, capacity, seed):
    rng = random.Random(seed)
    data = bytes(rng.randrange(256) for _ in range(input_len))
    bs = ByteStream(capacity)
    pushed = popped = 0
    available = capacity
    while pushed < len(data) or popped < len(data):
        assert bs.bytes_pushed() == pushed
        assert bs.bytes_popped() == popped
        assert bs.available_capacity() == available
        assert bs.bytes_buffered() == pushed - popped

        amount = rng.randint(0, len(data) - pushed)
        bs.push(data[pushed:pushed + amount])
        accepted = min(amount, available)
        pushed += accepted
        available -= accepted
        assert bs.bytes_pushed() == pushed
        assert bs.available_capacity() == available

        if pushed == len(data):
            bs.close()

        peeked = bs.peek()
        if pushed != popped:
            assert len(peeked) > 0
        assert popped + len(peeked) <= pushed
        assert peeked == data[popped:popped + len(peeked)]

        amount_to_pop = rng.randint(0, len(peeked))
        bs.pop(amount_to_pop)
        popped += amount_to_pop
        available += amount_to_pop
        assert bs.bytes_popped() == popped

    assert bs.is_closed() is True
    assert bs.is_finished() is True


# errors


def test_pop_more_than_buffered_raises():
    bs = ByteStream(4)
    bs.push(b"ab")
    with pytest.raises(ValueError):
        bs.pop(3)
    assert bs.bytes_buffered() == 2


def test_negative_capacity_raises():
    with pytest.raises(ValueError):
        ByteStream(-1)


def test_push_after_close_is_discarded():
    bs = ByteStream(4)
    bs.close()
    assert bs.push(b"ab") == 0
    assert bs.bytes_pushed() == 0
    assert bs.is_finished() is True