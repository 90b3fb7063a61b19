from invaders.transport.base import ANY_SOURCE, ANY_TAG, Channel, Envelope
from invaders.transport.local import LocalFabric

__all__ = ["ANY_SOURCE", "ANY_TAG", "Channel", "Envelope", "LocalFabric", "mpi_channel"]


# mpi4py initialises MPI on import, so only pull it in when asked for.
def mpi_channel(comm=None):
    from invaders.transport.mpi import MpiChannel
    return MpiChannel(comm)
