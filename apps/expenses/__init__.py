"""
Expenses App - Shared Trip Expense Management

This app records costs paid by one traveller on behalf of a travel plan,
splits them among JOINED plan members and tracks who has settled their share.

Key Features:
- EQUAL, CUSTOM and PERCENTAGE split policies with a 0.01 tolerance band
- Per-participant settlement (unpaid -> paid, never reversed)
- Plan-wide per-user net balances
- Category/payer breakdowns with budget comparison

Architecture:
- Models: Expense, ExpenseParticipant
- Services: split_calculation, authorization, expense_management,
  settlement, summary
- Views: RESTful API (ViewSet) over the services
- Exceptions: APIException hierarchy mapping to 400/403/404
"""
