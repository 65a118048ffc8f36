from __future__ import annotations

from datetime import date, datetime, time

import xlsxwriter

from riskboard.models.loan import Loan
from riskboard.services.amortization import amortization_schedule, calculate_amortization
from riskboard.services.loan_progress import derive_loan_progress
from riskboard.utils.timezone import today_local


def _start_date(loan: Loan) -> date:
    if loan.approved_at is not None:
        return loan.approved_at.date()
    return loan.created_at.date() if loan.created_at else today_local()


def build_schedule_report(loan: Loan, today: date, out_file) -> None:
    """Write the amortization schedule, payment history and summary of ``loan``.

    ``loan`` must have its client and payments loaded.
    """
    client = loan.client
    start = _start_date(loan)
    rows = amortization_schedule(loan.amount, loan.term_months, loan.interest_rate, start)
    figures = calculate_amortization(loan.amount, loan.term_months, loan.interest_rate)
    progress = derive_loan_progress(loan.amount, loan.payments, today)

    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    base_font = "Calibri"

    # ----------------------------
    # Formats
    # ----------------------------
    meta_label = wb.add_format({"bold": True, "font_name": base_font, "font_size": 11, "font_color": "#334155"})
    meta_value = wb.add_format({"font_name": base_font, "font_size": 11, "font_color": "#0f172a"})
    subtle = wb.add_format({"font_name": base_font, "font_size": 10, "font_color": "#64748b"})
    title = wb.add_format({"bold": True, "font_name": base_font, "font_size": 14, "font_color": "#0f172a"})

    header = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F1F5F9",
            "border": 1,
            "align": "center",
            "valign": "vcenter",
        }
    )

    date_fmt = wb.add_format({"font_name": base_font, "font_size": 11, "num_format": "yyyy-mm-dd", "border": 1})
    money2 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "#,##0.00", "border": 1, "align": "right"}
    )
    int0 = wb.add_format({"font_name": base_font, "font_size": 11, "num_format": "0", "border": 1, "align": "right"})
    text_cell = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "left"})

    total_label = wb.add_format(
        {"bold": True, "font_name": base_font, "font_size": 11, "bg_color": "#F8FAFC", "border": 1, "align": "left"}
    )
    total_money2 = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F8FAFC",
            "border": 1,
            "num_format": "#,##0.00",
            "align": "right",
        }
    )

    stripe_money2 = wb.add_format({"bg_color": "#FBFDFF", "num_format": "#,##0.00", "align": "right"})
    stripe_money2.set_border(1)

    # ----------------------------
    # Sheet 1: Schedule
    # ----------------------------
    ws = wb.add_worksheet("Schedule")

    ws.set_column(0, 0, 8)  # Period
    ws.set_column(1, 1, 12)  # Due date
    ws.set_column(2, 5, 16)  # Money columns

    ws.write(0, 0, "Client", meta_label)
    ws.write(0, 1, client.full_name, meta_value)

    ws.write(1, 0, "Loan", meta_label)
    ws.write(1, 1, f"#{loan.id} {loan.loan_type.lower()}", meta_value)

    ws.write(2, 0, "Terms", meta_label)
    ws.write(2, 1, f"{float(loan.amount):,.2f} @ {float(loan.interest_rate)}% for {loan.term_months} months", subtle)

    ws.write(2, 4, "Generated", meta_label)
    ws.write(2, 5, datetime.now().strftime("%Y-%m-%d %H:%M"), subtle)

    headers = ["Period", "Due Date", "Payment", "Principal", "Interest", "Balance"]
    ws.set_row(3, 18)
    for c, h in enumerate(headers):
        ws.write(3, c, h, header)

    ws.freeze_panes(4, 2)

    r = 4
    for row in rows:
        ws.write_number(r, 0, row.period, int0)
        ws.write_datetime(r, 1, datetime.combine(row.due_date, time.min), date_fmt)
        ws.write_number(r, 2, float(row.payment), money2)
        ws.write_number(r, 3, float(row.principal), money2)
        ws.write_number(r, 4, float(row.interest), money2)
        ws.write_number(r, 5, float(row.balance), money2)
        r += 1

    last_data_row = r - 1
    if last_data_row >= 4:
        ws.autofilter(3, 0, last_data_row, 5)
        ws.conditional_format(
            4, 2, last_data_row, 5, {"type": "formula", "criteria": "=MOD(ROW(),2)=0", "format": stripe_money2}
        )

        total_row = last_data_row + 1
        last_excel = last_data_row + 1
        ws.write(total_row, 0, "Totals", total_label)
        ws.write(total_row, 1, "", total_label)
        ws.write_formula(total_row, 2, f"=SUM(C5:C{last_excel})", total_money2)
        ws.write_formula(total_row, 3, f"=SUM(D5:D{last_excel})", total_money2)
        ws.write_formula(total_row, 4, f"=SUM(E5:E{last_excel})", total_money2)
        ws.write_formula(total_row, 5, f"=F{last_excel}", total_money2)

        ws.set_landscape()
        ws.fit_to_pages(1, 0)

    # ----------------------------
    # Sheet 2: Payments
    # ----------------------------
    pay_ws = wb.add_worksheet("Payments")
    pay_ws.set_column(0, 0, 12)
    pay_ws.set_column(1, 1, 16)
    pay_ws.set_column(2, 3, 16)

    pay_headers = ["Date", "Amount", "Method", "Status"]
    for c, h in enumerate(pay_headers):
        pay_ws.write(0, c, h, header)
    pay_ws.freeze_panes(1, 0)

    pr = 1
    for p in loan.payments:
        pay_ws.write_datetime(pr, 0, datetime.combine(p.payment_date, time.min), date_fmt)
        pay_ws.write_number(pr, 1, float(p.amount), money2)
        pay_ws.write(pr, 2, p.payment_method, text_cell)
        pay_ws.write(pr, 3, p.status, text_cell)
        pr += 1
    if pr > 1:
        pay_ws.autofilter(0, 0, pr - 1, 3)

    # ----------------------------
    # Sheet 3: Summary
    # ----------------------------
    summary = wb.add_worksheet("Summary")
    summary.set_column(0, 0, 22)
    summary.set_column(1, 1, 24)

    summary.write(0, 0, "Loan Summary", title)

    items = [
        ("Client", client.full_name, None),
        ("Credit Score", client.credit_score, int0),
        ("Status", loan.status, None),
        ("Principal", float(loan.amount), money2),
        ("Monthly Payment", float(figures.monthly_payment), money2),
        ("Total Amount", float(figures.total_amount), money2),
        ("Total Interest", float(figures.total_interest), money2),
        ("Total Paid", float(progress.total_paid), money2),
        ("Remaining Balance", float(progress.remaining_balance), money2),
        ("Payment Status", progress.payment_status.value, None),
    ]
    for i, (label, value, fmt) in enumerate(items, start=2):
        summary.write(i, 0, label, meta_label)
        if fmt is None:
            summary.write(i, 1, value, meta_value)
        else:
            summary.write_number(i, 1, value, fmt)

    nxt = len(items) + 2
    summary.write(nxt, 0, "Next Payment Due", meta_label)
    if progress.next_payment_due is not None:
        summary.write_datetime(nxt, 1, datetime.combine(progress.next_payment_due, time.min), date_fmt)
    else:
        summary.write(nxt, 1, "No pending payments", subtle)

    wb.close()
