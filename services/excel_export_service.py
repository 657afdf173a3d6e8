"""
Excel export service for the School Marksheet System
Class marks ledger as an .xlsx workbook
"""

import logging
from io import BytesIO

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from services.grading import grade_of

logger = logging.getLogger(__name__)

class ExcelExportService:
    """Service for exporting marks to Excel"""

    @staticmethod
    def create_workbook():
        """Create a new workbook with default styling"""
        wb = openpyxl.Workbook()
        return wb

    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4169E1", end_color="4169E1", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def auto_adjust_columns(ws):
        """Auto-adjust column widths"""
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)

            for cell in column:
                if cell.value is not None and len(str(cell.value)) > max_length:
                    max_length = len(str(cell.value))

            adjusted_width = min(max_length + 2, 50)
            ws.column_dimensions[column_letter].width = adjusted_width

    @staticmethod
    def center_all_cells(ws, min_row=1):
        """Center align all populated cells in the given worksheet."""
        max_row = ws.max_row or 0
        max_col = ws.max_column or 0
        for row in ws.iter_rows(min_row=min_row, max_row=max_row, min_col=1, max_col=max_col):
            for cell in row:
                if cell.value is not None:
                    cell.alignment = Alignment(horizontal="center", vertical="center")

    @staticmethod
    def set_percentage(cell, percent_0_to_100):
        """Write a numeric percentage (avoid text with green triangle)."""
        if percent_0_to_100 is None:
            cell.value = None
            return cell
        cell.value = float(percent_0_to_100) / 100.0
        if percent_0_to_100 == int(percent_0_to_100):
            cell.number_format = '0%'
        else:
            cell.number_format = '0.00%'
        return cell

    @staticmethod
    def export_class_marks(class_name, subjects, students, marks):
        """Class ledger: one row per student, one column group per subject.

        ``marks`` is any iterable of Mark rows for the class. Students without
        a mark in a subject get empty cells there; overall percentage is taken
        over the subjects the student has marks in.
        """
        try:
            wb = ExcelExportService.create_workbook()
            ws = wb.active
            ws.title = "Class Marks"

            # Class info table
            ExcelExportService.style_header_row(ws, 1, ['Field', 'Value'])
            ws.cell(row=2, column=1, value="Class")
            ws.cell(row=2, column=2, value=class_name)
            ws.cell(row=3, column=1, value="Total Students")
            ws.cell(row=3, column=2, value=len(students))

            by_pair = {(m.student_id, m.subject_id): m for m in marks}

            headers = ['Roll Number', 'Student Name', 'Section']
            for subject in subjects:
                headers += [f'{subject.name} (20)', f'{subject.name} (80)', f'{subject.name} Total']
            headers += ['Grand Total', 'Percentage', 'Grade', 'Remarks']

            header_row = 5
            ExcelExportService.style_header_row(ws, header_row, headers)

            row = header_row + 1
            for student in students:
                ws.cell(row=row, column=1, value=student.roll_number)
                ws.cell(row=row, column=2, value=student.name)
                ws.cell(row=row, column=3, value=student.section_name)

                col = 4
                grand_total = 0
                counted = 0
                for subject in subjects:
                    mark = by_pair.get((student.id, subject.id))
                    if mark is not None:
                        total = mark.formative_score + mark.summative_score
                        ws.cell(row=row, column=col, value=mark.formative_score)
                        ws.cell(row=row, column=col + 1, value=mark.summative_score)
                        ws.cell(row=row, column=col + 2, value=total)
                        grand_total += total
                        counted += 1
                    col += 3

                ws.cell(row=row, column=col, value=grand_total)
                if counted:
                    percentage = round(grand_total / counted, 2)
                    grade = grade_of(percentage)
                    ExcelExportService.set_percentage(ws.cell(row=row, column=col + 1), percentage)
                    ws.cell(row=row, column=col + 2, value=grade.letter)
                    ws.cell(row=row, column=col + 3, value=grade.remark)
                row += 1

            ExcelExportService.center_all_cells(ws, min_row=header_row)
            ExcelExportService.auto_adjust_columns(ws)
            return wb

        except Exception:
            logger.exception("Error exporting class marks for %s", class_name)
            return None

    @staticmethod
    def workbook_to_bytes(workbook):
        """Convert workbook to bytes for download"""
        output = BytesIO()
        workbook.save(output)
        output.seek(0)
        return output.getvalue()
