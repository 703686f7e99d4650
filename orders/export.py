import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

HEADER_FONT = Font(bold=True, size=12)
TITLE_FONT = Font(bold=True, size=16)


def _write_header(ws, row, headers):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = HEADER_FONT


def _autosize(ws):
    for col_idx, column in enumerate(ws.iter_cols(), 1):
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 40)


def build_sales_workbook(report, start_date, end_date):
    """Generate the daily sales workbook: Summary, Daily Sales and Top Items sheets"""
    wb = openpyxl.Workbook()
    summary = report['summary']

    ws = wb.active
    ws.title = "Summary"
    ws['A1'] = "Daily Sales Report"
    ws['A1'].font = TITLE_FONT
    ws['A2'] = f"Period: {start_date.isoformat()} to {end_date.isoformat()}"
    ws.merge_cells('A1:D1')
    ws.merge_cells('A2:D2')

    rows = [
        ("Total Revenue", float(summary['totalRevenue'])),
        ("Total Transactions", summary['totalTransactions']),
        ("Average Order Value", float(summary['averageOrderValue'])),
        ("Days With Sales", report['totalDays']),
    ]
    for row, (label, value) in enumerate(rows, 4):
        ws.cell(row=row, column=1, value=label).font = HEADER_FONT
        ws.cell(row=row, column=2, value=value)
    _autosize(ws)

    ws = wb.create_sheet("Daily Sales")
    _write_header(ws, 1, ['Date', 'Transactions', 'Revenue', 'Cash', 'Debit', 'E-Wallet'])
    for row, day in enumerate(report['dailySales'], 2):
        methods = day['paymentMethods']
        ws.cell(row=row, column=1, value=day['date'])
        ws.cell(row=row, column=2, value=day['transactions'])
        ws.cell(row=row, column=3, value=float(day['revenue']))
        ws.cell(row=row, column=4, value=methods.get('cash', 0))
        ws.cell(row=row, column=5, value=methods.get('debit', 0))
        ws.cell(row=row, column=6, value=methods.get('ewallet', 0))
    _autosize(ws)

    ws = wb.create_sheet("Top Items")
    _write_header(ws, 1, ['Rank', 'Item', 'Category', 'Quantity', 'Revenue'])
    for rank, item in enumerate(report['topItems'], 1):
        row = rank + 1
        ws.cell(row=row, column=1, value=rank)
        ws.cell(row=row, column=2, value=item['name'])
        ws.cell(row=row, column=3, value=item['category'])
        ws.cell(row=row, column=4, value=item['quantity'])
        ws.cell(row=row, column=5, value=float(item['revenue']))
    _autosize(ws)

    return wb
