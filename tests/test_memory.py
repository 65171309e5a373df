from careerdesk.core.memory import InMemoryConversationStore
from careerdesk.core.types import Turn


def test_append_is_ordered_and_reads_are_copies() -> None:
    store = InMemoryConversationStore()
    store.append(Turn.user("Hi"), Turn.assistant("Hello!"))

    snapshot = store.read()
    snapshot.append(Turn.user("sneaky"))

    assert store.read() == [Turn.user("Hi"), Turn.assistant("Hello!")]
    assert len(store) == 2


def test_append_without_turns_is_noop() -> None:
    store = InMemoryConversationStore([Turn.user("seed")])
    store.append()

    assert store.read() == [Turn.user("seed")]
