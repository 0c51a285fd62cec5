from django.db import models


class ReviewAction(models.TextChoices):
    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"


MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 1000
