COORDINATOR_RANK = 0
NO_NEIGHBOR = -2

# communication tags
TAG_NEIGHBOR = 0
TAG_REPORT = 1
TAG_DISABLE = 2
TAG_TERMINATE = 3
TAG_FIRE = 4

TAG_NAMES = {
    TAG_NEIGHBOR: "neighbor",
    TAG_REPORT: "report",
    TAG_DISABLE: "disable",
    TAG_TERMINATE: "terminate",
    TAG_FIRE: "fire",
}

# invader status, as held in the coordinator grid
ACTIVE = "active"
DISABLED = "disabled"
TERMINATED = "terminated"

STATUS_LETTERS = {
    ACTIVE: "A",
    DISABLED: "D",
    TERMINATED: "X",
}


def worker_rank(worker_id):
    return worker_id + 1


def worker_id(rank):
    return rank - 1


def tick_message(tick, final=False):
    return (tick, final)
