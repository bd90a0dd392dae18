"""Interactive widgets embedded in coach responses.

The model wraps widget JSON in bracketed tags; parsing lives in
``indie_coach.parsing.tags``. This package holds the widget data models and
their calculations, independent of any UI toolkit.

Widgets:
    - ticket_estimator: Show revenue, cost, and profit projection
    - budget_table: Low/high/estimate budget with totals
    - branding_guide: Editable palette, fonts, and logo prompt
    - book_summary: Static promo card content
"""
