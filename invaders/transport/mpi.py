from mpi4py import MPI

from invaders.transport.base import ANY_SOURCE, ANY_TAG, Channel, Envelope


def _source(source):
    return MPI.ANY_SOURCE if source == ANY_SOURCE else source


def _tag(tag):
    return MPI.ANY_TAG if tag == ANY_TAG else tag


class MpiRequest:
    def __init__(self, request):
        self.request = request

    def test(self):
        return self.request.test()

    def cancel(self):
        self.request.Cancel()
        self.request.Wait()


class MpiChannel(Channel):
    def __init__(self, comm=None):
        self.comm = comm if comm is not None else MPI.COMM_WORLD

    @property
    def rank(self):
        return self.comm.Get_rank()

    @property
    def size(self):
        return self.comm.Get_size()

    def sync(self, value=None):
        return self.comm.bcast(value, root=self.root)

    def send(self, payload, dest, tag):
        self.comm.send(payload, dest=dest, tag=tag)

    def isend(self, payload, dest, tag):
        return MpiRequest(self.comm.isend(payload, dest=dest, tag=tag))

    def irecv(self, source, tag):
        return MpiRequest(self.comm.irecv(source=source, tag=tag))

    def poll(self, source=ANY_SOURCE, tag=ANY_TAG):
        status = MPI.Status()
        if not self.comm.iprobe(source=_source(source), tag=_tag(tag), status=status):
            return None
        payload = self.comm.recv(source=status.Get_source(), tag=status.Get_tag())
        return Envelope(status.Get_source(), status.Get_tag(), payload)

    def recv(self, source=ANY_SOURCE, tag=ANY_TAG):
        status = MPI.Status()
        payload = self.comm.recv(source=_source(source), tag=_tag(tag), status=status)
        return Envelope(status.Get_source(), status.Get_tag(), payload)
