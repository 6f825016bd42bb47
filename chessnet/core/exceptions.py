"""
Error taxonomy shared by all layers.

Two families:
* SessionError: fatal. The connection is torn down and the game ends.
* GameError: recoverable within a single turn. Nothing gets mutated and the session carries on.
"""


class ChessNetError(Exception):
    """Base class for everything raised on purpose by this package."""


# --- FATAL: END THE SESSION ---
class SessionError(ChessNetError):
    """The connection cannot be used anymore."""


class HandshakeError(SessionError):
    """The opening record was malformed, missing, or refused."""


class ProtocolError(SessionError):
    """A record could not be decoded: bad syntax, unknown variant tag, or stream closed mid-record."""


class PeerConnectionError(SessionError, ConnectionError):
    """Socket level failure. Includes timeouts and an orderly disconnect of the peer."""


# --- RECOVERABLE: RESOLVED WITHIN ONE TURN ---
class GameError(ChessNetError):
    """The request was understood but cannot be honoured in the current game state."""


class IllegalMoveError(GameError):
    """The rules engine refused the move."""


class NotYourTurnError(GameError):
    """A move was proposed on behalf of the side that is not to move."""


class GameStateError(GameError):
    """The game is in a state that does not allow the requested action (ex. it is already over)."""


class InvalidFENError(GameError):
    """A FEN string could not be parsed."""


class TranslationError(GameError):
    """A coordinate or piece value has no counterpart on the other side of a translation boundary."""
