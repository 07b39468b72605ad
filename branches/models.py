"""
Branch models
"""
from django.db import models


class Branch(models.Model):
    """
    A physical study-hall location. Students, seats, history rows and expenses
    keep a nullable reference, so deleting a branch leaves them unassigned.
    """
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'branches'
        verbose_name = 'Branch'
        verbose_name_plural = 'Branches'
        ordering = ['name']

    def __str__(self):
        return self.name if not self.code else f"{self.name} ({self.code})"
