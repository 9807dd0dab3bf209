"""
Shared Kernel

Building blocks used by every homestay app: domain events, value objects,
the booking error taxonomy and the transactional unit of work.
"""
