"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the rules that span entities: thread shape,
    vote aggregation, reputation, moderation and throttling.
    """

    pass
