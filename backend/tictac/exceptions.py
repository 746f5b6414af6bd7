"""Ошибки игрового ядра."""


class TicTacError(Exception):
    """Базовая ошибка."""


class InvalidMove(TicTacError):
    """
    Ход отклонён: вне доски, клетка занята, не твой ход или нет партии.
    Сообщается только отправителю, состояние партии не меняется.
    """


class MalformedRequest(TicTacError):
    """Сообщение не разобрано или неизвестного типа. Игнорируется."""
