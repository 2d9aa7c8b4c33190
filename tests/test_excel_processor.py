"""
Excelシート書き込みのテスト
"""
import shutil
import tempfile
import unittest
import sys
from pathlib import Path

import openpyxl
from openpyxl import Workbook

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from profit_and_loss_converter.data_models import CellStyle, Coordinate
from profit_and_loss_converter.exceptions import IOFailureError, SheetOperationError
from profit_and_loss_converter.excel_processor import WorksheetSink


class TestWorksheetSink(unittest.TestCase):
    """WorksheetSink のテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.xlsx_path = self.temp_dir / '確定申告.xlsx'

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def create_workbook(self, sheet_titles):
        workbook = Workbook()
        workbook.active.title = sheet_titles[0]
        for title in sheet_titles[1:]:
            workbook.create_sheet(title)
        return workbook

    def test_new_workbook_has_only_target_sheet(self):
        sink = WorksheetSink.open(self.xlsx_path, '株取引')
        sink.write_cell(Coordinate(2, 2), '約定日', CellStyle(background_color='FFF8CBAD'))
        sink.save()

        workbook = openpyxl.load_workbook(self.xlsx_path)
        self.assertEqual(workbook.sheetnames, ['株取引'])
        self.assertEqual(workbook['株取引']['B2'].value, '約定日')

    def test_recreate_sheet_replaces_old_contents(self):
        workbook = self.create_workbook(['表紙', '株取引'])
        workbook['株取引']['Z99'] = 'old'
        workbook['表紙']['A1'] = 'keep'
        workbook.save(self.xlsx_path)

        for _ in range(2):
            sink = WorksheetSink.open(self.xlsx_path, '株取引')
            sink.write_cell(Coordinate(2, 2), 'new', CellStyle())
            sink.save()

        workbook = openpyxl.load_workbook(self.xlsx_path)
        self.assertEqual(workbook.sheetnames.count('株取引'), 1)
        self.assertEqual(workbook['表紙']['A1'].value, 'keep')
        self.assertIsNone(workbook['株取引']['Z99'].value)
        self.assertEqual(workbook['株取引']['B2'].value, 'new')

    def test_recreate_sheet_rejects_invalid_title(self):
        workbook = Workbook()
        with self.assertRaises(SheetOperationError):
            WorksheetSink.recreate_sheet(workbook, '損益/2024')

    def test_cell_style_is_applied(self):
        sink = WorksheetSink.open(self.xlsx_path, '株取引')
        sink.write_cell(
            Coordinate(11, 3), -500,
            CellStyle('FFC5E0B4', '"¥"#,##0;"¥"-#,##0', 'FFFF0000')
        )
        sink.write_cell(Coordinate(12, 3), None, CellStyle())
        sink.set_column_width(11, 16.0)
        sink.save()

        sheet = openpyxl.load_workbook(self.xlsx_path)['株取引']
        cell = sheet['K3']
        self.assertEqual(cell.value, -500)
        self.assertEqual(cell.number_format, '"¥"#,##0;"¥"-#,##0')
        self.assertEqual(cell.fill.fill_type, 'solid')
        self.assertEqual(cell.fill.start_color.rgb, 'FFC5E0B4')
        self.assertEqual(cell.font.color.rgb, 'FFFF0000')
        self.assertEqual(cell.border.left.style, 'thin')
        self.assertEqual(cell.border.bottom.style, 'thin')

        empty = sheet['L3']
        self.assertIsNone(empty.value)
        self.assertEqual(empty.border.top.style, 'thin')
        self.assertEqual(sheet.column_dimensions['K'].width, 16.0)

    def test_save_only_once(self):
        sink = WorksheetSink.open(self.xlsx_path, '株取引')
        sink.save()
        with self.assertRaises(SheetOperationError):
            sink.save()

    def test_broken_workbook_raises_io_failure(self):
        self.xlsx_path.write_bytes(b'not a zip file')
        with self.assertRaises(IOFailureError):
            WorksheetSink.open(self.xlsx_path, '株取引')


if __name__ == '__main__':
    unittest.main()
