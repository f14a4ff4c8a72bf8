from django.core.exceptions import ValidationError


class InvalidDraftTransition(ValidationError):
    """
    A change was attempted on a purchase order that is no longer a draft
    (or a draft was placed empty). The order is left unchanged.
    """

    def __init__(self, message, order=None):
        self.order = order
        super().__init__(message, code='invalid_draft_transition')
