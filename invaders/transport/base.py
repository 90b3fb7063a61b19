from dataclasses import dataclass

from invaders.protocol import COORDINATOR_RANK

ANY_SOURCE = -1
ANY_TAG = -1


@dataclass(frozen=True)
class Envelope:
    source: int
    tag: int
    payload: object


class Channel:
    """Point-to-point and broadcast messaging between the game processes.

    ``sync`` is the per-tick barrier: the coordinator pushes a value and
    every other rank blocks until it arrives. ``poll`` is a probe followed
    by a receive and never waits. ``isend``/``irecv`` return handles with
    ``test()`` -> ``(done, payload)`` and ``cancel()``.
    """

    root = COORDINATOR_RANK

    @property
    def rank(self):
        raise NotImplementedError

    @property
    def size(self):
        raise NotImplementedError

    def sync(self, value=None):
        raise NotImplementedError

    def send(self, payload, dest, tag):
        raise NotImplementedError

    def isend(self, payload, dest, tag):
        raise NotImplementedError

    def irecv(self, source, tag):
        raise NotImplementedError

    def poll(self, source=ANY_SOURCE, tag=ANY_TAG):
        raise NotImplementedError

    def recv(self, source=ANY_SOURCE, tag=ANY_TAG):
        raise NotImplementedError
