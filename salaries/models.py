"""
Salary Models

Fixed salaries are agreed per employee per period. Advances and bonuses
are paid out during the period and each one is posted to the expense
ledger immediately as LABOR_FIXED. Whatever is left of the base salary
(base - advances) is posted when the period closes.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class EmployeeSalary(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='salaries'
    )
    period = models.ForeignKey('periods.Period', on_delete=models.PROTECT, related_name='salaries')
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='salaries'
    )
    base_salary = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    finalized_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the remaining salary was posted at period close"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employee_salaries'
        ordering = ['employee__username']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'period'], name='one_salary_per_employee_period'),
        ]

    def __str__(self):
        return f"{self.employee} {self.base_salary} ({self.period})"


class SalaryAdvance(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='salary_advances'
    )
    period = models.ForeignKey('periods.Period', on_delete=models.PROTECT, related_name='salary_advances')
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    description = models.CharField(max_length=500, blank=True)
    expense = models.OneToOneField(
        'expenses.PeriodExpense',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='salary_advance'
    )
    given_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'salary_advances'
        ordering = ['-created_at']


class SalaryBonus(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='salary_bonuses'
    )
    period = models.ForeignKey('periods.Period', on_delete=models.PROTECT, related_name='salary_bonuses')
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    reason = models.CharField(max_length=500)
    expense = models.OneToOneField(
        'expenses.PeriodExpense',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='salary_bonus'
    )
    given_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'salary_bonuses'
        ordering = ['-created_at']
