class SchedulerError(Exception):
    """Base class for errors raised by the scheduler."""

    code = "scheduler_error"
    retryable = False


class NotFound(SchedulerError):
    code = "not_found"


class UserNotFound(NotFound):
    def __init__(self, user_id):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class CardNotFound(NotFound):
    def __init__(self, card_id):
        super().__init__(f"Card {card_id} not found")
        self.card_id = card_id


class SessionCardMissing(CardNotFound):
    """The session's current card is gone; ``session`` has it dropped."""

    def __init__(self, card_id, session):
        super().__init__(card_id)
        self.session = session


class ProgressNotFound(NotFound):
    def __init__(self, user_id, card_id):
        super().__init__(f"No study progress for user {user_id} and card {card_id}")
        self.user_id = user_id
        self.card_id = card_id


class InvalidRating(SchedulerError):
    code = "invalid_rating"

    def __init__(self, value):
        super().__init__(
            f"Invalid rating {value!r}; expected one of again, hard, good, easy"
        )
        self.value = value


class ConcurrentUpdateConflict(SchedulerError):
    """Another rating for the same (user, card) pair won the write."""

    code = "concurrent_update"
    retryable = True

    def __init__(self, user_id, card_id):
        super().__init__(
            f"Progress for user {user_id} and card {card_id} changed concurrently"
        )
        self.user_id = user_id
        self.card_id = card_id


class StorageUnavailable(SchedulerError):
    code = "storage_unavailable"
    retryable = True


class SessionComplete(SchedulerError):
    code = "session_complete"

    def __init__(self):
        super().__init__("Study session has no remaining cards")
