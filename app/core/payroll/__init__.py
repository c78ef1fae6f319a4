"""
Payroll module - lønnstillegg, overtid og lønnskjøring.

Eksporterer alle publike funksjoner.
"""

from .overtime import calculate_overtime, minutes_after, minutes_pay, overtime_pay
from .period import calculate_payroll_for_period, export_payroll_csv
from .shift_pay import build_supplement_line_items, build_work_line_items, calculate_shift_pay
from .supplements import compute_supplements, rule_sort_key, rule_spans, supplement_amount

__all__ = [
    # supplements
    "compute_supplements",
    "supplement_amount",
    "rule_sort_key",
    "rule_spans",
    # overtime
    "calculate_overtime",
    "minutes_after",
    "minutes_pay",
    "overtime_pay",
    # shift pay
    "calculate_shift_pay",
    "build_work_line_items",
    "build_supplement_line_items",
    # period
    "calculate_payroll_for_period",
    "export_payroll_csv",
]
