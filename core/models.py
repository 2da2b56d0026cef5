from django.db import models


class AbstractBaseModel(models.Model):
    """
    Common timestamps for every relational record.

    Integer primary keys come from DEFAULT_AUTO_FIELD; records are addressed
    publicly as /<entity>/<id>/<slug>.
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
