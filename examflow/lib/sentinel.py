class NotReady(object):
    """Stands in for a container value that boot has not supplied yet."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NotReady"
