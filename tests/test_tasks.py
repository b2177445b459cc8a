from lingospark.tasks import InlineDispatcher, ThreadDispatcher


class ImmediateRoot:
    """Minimal stand-in for tk.Tk.after."""

    def __init__(self):
        self.delays = []

    def after(self, delay_ms, callback):
        self.delays.append(delay_ms)
        callback()


def test_inline_dispatcher_delivers_result():
    results = []
    InlineDispatcher().submit("job", lambda: 42, results.append)
    assert results == [42]


def test_inline_dispatcher_routes_errors():
    errors = []
    InlineDispatcher().submit("job", lambda: 1 / 0, lambda r: None, errors.append)
    assert isinstance(errors[0], ZeroDivisionError)


def test_inline_dispatcher_runs_delayed_callbacks_immediately():
    calls = []
    InlineDispatcher().later(200, lambda: calls.append("moved"))
    assert calls == ["moved"]


def test_thread_dispatcher_marshals_through_after():
    root = ImmediateRoot()
    results = []
    thread = ThreadDispatcher(root).submit("job", lambda: "done", results.append)
    thread.join(timeout=5)

    assert results == ["done"]
    assert root.delays == [0]


def test_thread_dispatcher_reports_errors():
    root = ImmediateRoot()
    errors = []

    def work():
        raise ValueError("boom")

    thread = ThreadDispatcher(root).submit("job", work, lambda r: None, errors.append)
    thread.join(timeout=5)

    assert isinstance(errors[0], ValueError)


def test_thread_dispatcher_later_uses_after():
    root = ImmediateRoot()
    calls = []
    ThreadDispatcher(root).later(200, lambda: calls.append(1))
    assert root.delays == [200]
    assert calls == [1]
