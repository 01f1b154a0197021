# qrorder/domain/errors.py


class InvalidInput(ValueError):
    """Rejected request: blank table, empty item list, bad quantity or missing item id.

    Subclasses ValueError so routers can keep mapping ValueError to 400.
    Raised before any state is touched.
    """
