import weakref

from iterable_weakset.types import Token, WeakHandle


class Object:
    pass


class TestWeakHandle:
    def test_resolve(self, collect):
        obj = Object()
        handle = WeakHandle(obj)

        assert isinstance(handle, weakref.ref)
        assert handle.resolve() is obj
        assert handle.alive

        del obj
        collect()
        assert handle.resolve() is None
        assert not handle.alive

    def test_fresh_handles(self):
        obj = Object()
        h1, h2 = WeakHandle(obj), WeakHandle(obj)

        assert h1 is not h2
        assert h1 != h2
        assert h1 == h1
        assert len({h1, h2}) == 2

    def test_hashable_after_reclamation(self, collect):
        obj = Object()
        handle = WeakHandle(obj)
        del obj
        collect()

        assert {handle: 1}[handle] == 1

    def test_unhashable_referent(self):
        class Unhashable:
            __hash__ = None

        obj = Unhashable()
        assert hash(WeakHandle(obj)) is not None

    def test_repr(self, collect):
        obj = Object()
        handle = WeakHandle(obj)
        assert repr(handle).startswith("<WeakHandle at 0x")
        assert "to 'Object'" in repr(handle)

        del obj
        collect()
        assert repr(handle).endswith("; dead>")


class TestToken:
    def test_uniqueness(self):
        t1, t2 = Token(), Token()
        assert t1 is not t2
        assert t1 != t2
        assert t2.serial > t1.serial
        assert repr(t1) == f"<Token #{t1.serial}>"
