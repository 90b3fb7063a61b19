DEFAULT_CAPACITY = 100


class Projectile:
    def __init__(self):
        self.column = 0
        self.target_row = None
        self.ticks_remaining = 0
        self.active = False
        self.source = None

    def __repr__(self):
        return (f"Projectile(column={self.column}, target_row={self.target_row}, "
                f"ticks_remaining={self.ticks_remaining}, source={self.source})")


# Fixed-size arena; allocation takes the first free slot.
class ProjectilePool:
    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.slots = [Projectile() for _ in range(capacity)]

    @property
    def capacity(self):
        return len(self.slots)

    def allocate(self, column, ticks, source, target_row=None):
        for slot, projectile in enumerate(self.slots):
            if not projectile.active:
                projectile.column = column
                projectile.target_row = target_row
                projectile.ticks_remaining = ticks
                projectile.active = True
                projectile.source = source
                return slot
        return None

    def release(self, slot):
        self.slots[slot].active = False

    def active(self):
        return [(slot, p) for slot, p in enumerate(self.slots) if p.active]

    def count(self):
        return sum(1 for p in self.slots if p.active)

    def advance(self):
        """Count every live projectile down by one tick.

        Returns the projectiles whose countdown reached zero, already
        released so their slots can be reused.
        """
        landed = []
        for slot, projectile in self.active():
            projectile.ticks_remaining -= 1
            if projectile.ticks_remaining > 0:
                continue
            landed.append(projectile)
            self.release(slot)
        return landed


def travel_time(rows, row):
    return 2 + (rows - 1 - row)
