class RequestGenerations:
    """
    Tracks the newest request per logical slot (a task's suggestions, a day's
    overview) so a slower, superseded response is dropped instead of applied.

        token = generations.begin("suggestions:42")
        result = await client.task_suggestions(42)
        if generations.is_current("suggestions:42", token):
            show(result)
    """

    def __init__(self):
        self._current: dict[str, int] = {}

    def begin(self, slot: str) -> int:
        token = self._current.get(slot, 0) + 1
        self._current[slot] = token
        return token

    def is_current(self, slot: str, token: int) -> bool:
        return self._current.get(slot) == token

    def cancel(self, slot: str) -> None:
        """Make every in-flight request for ``slot`` stale."""
        self.begin(slot)
