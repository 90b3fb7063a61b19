import queue
import threading

from invaders.transport.base import ANY_SOURCE, ANY_TAG, Channel, Envelope


def _matches(envelope, source, tag):
    return (source == ANY_SOURCE or envelope.source == source) and \
           (tag == ANY_TAG or envelope.tag == tag)


class LocalFabric:
    """Every rank as a thread in one interpreter, sharing per-rank mailboxes."""

    def __init__(self, size):
        if size < 2:
            raise ValueError("size must be >= 2")
        self.size = size
        self.cond = threading.Condition()
        self.mailboxes = [[] for _ in range(size)]
        self.sync_queues = [queue.Queue() for _ in range(size)]

    def channel(self, rank):
        return LocalChannel(self, rank)

    def channels(self):
        return [self.channel(rank) for rank in range(self.size)]

    def deliver(self, dest, envelope):
        with self.cond:
            self.mailboxes[dest].append(envelope)
            self.cond.notify_all()

    def _take(self, rank, source, tag):
        mailbox = self.mailboxes[rank]
        for i, envelope in enumerate(mailbox):
            if _matches(envelope, source, tag):
                return mailbox.pop(i)
        return None

    def take(self, rank, source, tag):
        with self.cond:
            return self._take(rank, source, tag)

    def wait_take(self, rank, source, tag):
        with self.cond:
            while True:
                envelope = self._take(rank, source, tag)
                if envelope is not None:
                    return envelope
                self.cond.wait()

    def pending(self, rank):
        with self.cond:
            return list(self.mailboxes[rank])


class SendRequest:
    def test(self):
        return True, None

    def cancel(self):
        pass


class RecvRequest:
    def __init__(self, fabric, rank, source, tag):
        self.fabric = fabric
        self.rank = rank
        self.source = source
        self.tag = tag
        self.envelope = None
        self.cancelled = False

    def test(self):
        if self.envelope is None and not self.cancelled:
            self.envelope = self.fabric.take(self.rank, self.source, self.tag)
        if self.envelope is None:
            return False, None
        return True, self.envelope.payload

    def cancel(self):
        self.cancelled = True


class LocalChannel(Channel):
    def __init__(self, fabric, rank):
        self.fabric = fabric
        self._rank = rank

    @property
    def rank(self):
        return self._rank

    @property
    def size(self):
        return self.fabric.size

    def sync(self, value=None):
        if self._rank == self.root:
            for rank in range(self.fabric.size):
                if rank != self.root:
                    self.fabric.sync_queues[rank].put(value)
            return value
        return self.fabric.sync_queues[self._rank].get()

    def send(self, payload, dest, tag):
        self.fabric.deliver(dest, Envelope(self._rank, tag, payload))

    def isend(self, payload, dest, tag):
        self.send(payload, dest, tag)
        return SendRequest()

    def irecv(self, source, tag):
        return RecvRequest(self.fabric, self._rank, source, tag)

    def poll(self, source=ANY_SOURCE, tag=ANY_TAG):
        return self.fabric.take(self._rank, source, tag)

    def recv(self, source=ANY_SOURCE, tag=ANY_TAG):
        return self.fabric.wait_take(self._rank, source, tag)
