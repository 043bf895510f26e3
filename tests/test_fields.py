# Copyright 2018 Brian T. Park
#
# MIT License

import unittest

from olsontools.data_types.ot_errors import FieldParseError
from olsontools.data_types.ot_types import MAX_YEAR
from olsontools.data_types.ot_types import MIN_YEAR
from olsontools.data_types.ot_types import RuleRef
from olsontools.data_types.ot_types import RuleRefKind
from olsontools.data_types.ot_types import TimeKind
from olsontools.data_types.ot_types import TimeOfDay
from olsontools.extractor.fields import month_to_index
from olsontools.extractor.fields import parse_at_time_string
from olsontools.extractor.fields import parse_format
from olsontools.extractor.fields import parse_letter
from olsontools.extractor.fields import parse_offset_string
from olsontools.extractor.fields import parse_on_day
from olsontools.extractor.fields import parse_on_day_string
from olsontools.extractor.fields import parse_rules_string
from olsontools.extractor.fields import parse_save_string
from olsontools.extractor.fields import parse_to_year
from olsontools.extractor.fields import parse_until_year
from olsontools.extractor.fields import parse_year
from olsontools.extractor.fields import resolve_on_day


class TestParseYear(unittest.TestCase):
    def test_parse_year(self) -> None:
        self.assertEqual(1900, parse_year('1900'))
        self.assertEqual(MIN_YEAR, parse_year('minimum'))
        self.assertEqual(MIN_YEAR, parse_year('min'))
        self.assertEqual(MAX_YEAR, parse_year('maximum'))
        self.assertEqual(MAX_YEAR, parse_year('max'))

    def test_sentinels_bracket_real_years(self) -> None:
        self.assertLess(parse_year('minimum'), parse_year('1900'))
        self.assertLess(parse_year('1900'), parse_year('maximum'))
        self.assertLess(parse_year('min'), parse_year('1844'))
        self.assertLess(parse_year('2037'), parse_year('max'))

    def test_parse_to_year(self) -> None:
        self.assertEqual(1967, parse_to_year('only', 1967))
        self.assertEqual(2006, parse_to_year('2006', 1967))
        self.assertEqual(MAX_YEAR, parse_to_year('max', 2007))

    def test_parse_year_fails(self) -> None:
        self.assertRaises(FieldParseError, parse_year, 'only')
        self.assertRaises(FieldParseError, parse_year, '')
        self.assertRaises(FieldParseError, parse_year, '19x0')
        self.assertRaises(FieldParseError, parse_year, '-')
        self.assertRaises(FieldParseError, parse_to_year, 'never', 2000)

    def test_parse_year_error_names_field(self) -> None:
        with self.assertRaises(FieldParseError) as context:
            parse_to_year('abc', 2000)
        self.assertEqual('TO', context.exception.field)
        self.assertEqual('abc', context.exception.text)

    def test_parse_until_year(self) -> None:
        self.assertEqual(1883, parse_until_year('1883'))
        self.assertRaises(FieldParseError, parse_until_year, 'max')
        self.assertRaises(FieldParseError, parse_until_year, '0')
        self.assertRaises(FieldParseError, parse_until_year, '10000')

    def test_explicit_year_stays_inside_sentinels(self) -> None:
        self.assertEqual(1, parse_year('1'))
        self.assertEqual(MAX_YEAR - 1, parse_year(str(MAX_YEAR - 1)))
        for year in ('-1', '0', str(MAX_YEAR), '10000'):
            with self.subTest(year=year):
                self.assertRaises(FieldParseError, parse_year, year)
                self.assertRaises(
                    FieldParseError, parse_to_year, year, 1900)


class TestMonthToIndex(unittest.TestCase):
    def test_month_to_index_success(self) -> None:
        self.assertEqual(1, month_to_index('Jan'))
        self.assertEqual(1, month_to_index('jan'))
        self.assertEqual(1, month_to_index('January'))

        self.assertEqual(2, month_to_index('Feb'))
        self.assertEqual(2, month_to_index('feb'))
        self.assertEqual(2, month_to_index('February'))

        self.assertEqual(3, month_to_index('MAR'))
        self.assertEqual(5, month_to_index('May'))
        self.assertEqual(9, month_to_index('September'))
        self.assertEqual(10, month_to_index('oct'))
        self.assertEqual(12, month_to_index('December'))

    def test_month_to_index_failure(self) -> None:
        self.assertRaises(FieldParseError, month_to_index, '')
        self.assertRaises(FieldParseError, month_to_index, 'none')
        self.assertRaises(FieldParseError, month_to_index, 'ja')
        self.assertRaises(FieldParseError, month_to_index, 'fe')


class TestParseOnDayString(unittest.TestCase):
    def test_parse_on_day_string(self) -> None:
        self.assertEqual('20', parse_on_day_string('20'))
        self.assertEqual('lastSun', parse_on_day_string('lastSun'))
        self.assertEqual('lastSun', parse_on_day_string('lastsunday'))
        self.assertEqual('Sun>=8', parse_on_day_string('Sun>=8'))
        self.assertEqual('Fri<=2', parse_on_day_string('Fri<=2'))
        self.assertEqual('Sat>=1', parse_on_day_string('Saturday>=01'))

    def test_parse_on_day_string_fails(self) -> None:
        self.assertRaises(FieldParseError, parse_on_day_string, '')
        self.assertRaises(FieldParseError, parse_on_day_string, '0')
        self.assertRaises(FieldParseError, parse_on_day_string, '32')
        self.assertRaises(FieldParseError, parse_on_day_string, 'lastFoo')
        self.assertRaises(FieldParseError, parse_on_day_string, 'Sun>8')
        self.assertRaises(FieldParseError, parse_on_day_string, 'Sun>=')

    def test_parse_on_day(self) -> None:
        self.assertEqual((0, 20), parse_on_day('20'))
        self.assertEqual((7, 0), parse_on_day('lastSun'))
        self.assertEqual((7, 8), parse_on_day('Sun>=8'))
        self.assertEqual((5, -2), parse_on_day('Fri<=2'))

    def test_resolve_on_day(self) -> None:
        # US DST of 2020 started on Sun Mar 8 and ended on Sun Nov 1.
        self.assertEqual((3, 8), resolve_on_day('Sun>=8', 2020, 3))
        self.assertEqual((11, 1), resolve_on_day('Sun>=1', 2020, 11))
        # EU DST of 2020 ended on Sun Oct 25.
        self.assertEqual((10, 25), resolve_on_day('lastSun', 2020, 10))
        self.assertEqual((4, 15), resolve_on_day('15', 2020, 4))
        # Fri<=1 in Mar 2020 is Fri Feb 28.
        self.assertEqual((2, 28), resolve_on_day('Fri<=1', 2020, 3))
        # Spills across the year boundary.
        self.assertEqual((13, 3), resolve_on_day('Sun>=31', 2020, 12))
        self.assertEqual((0, 27), resolve_on_day('Sun<=1', 2021, 1))
        self.assertEqual((2, 29), resolve_on_day('29', 2020, 2))

    def test_resolve_on_day_fails(self) -> None:
        # April has no 31st.
        self.assertRaises(
            FieldParseError, resolve_on_day, 'Sun>=31', 2020, 4)
        self.assertRaises(
            FieldParseError, resolve_on_day, 'Fri<=31', 2020, 4)
        self.assertRaises(FieldParseError, resolve_on_day, '31', 2020, 4)
        self.assertRaises(FieldParseError, resolve_on_day, '29', 2021, 2)
        # Sentinel years are not calendar years.
        self.assertRaises(
            FieldParseError, resolve_on_day, 'lastSun', MIN_YEAR, 3)
        self.assertRaises(
            FieldParseError, resolve_on_day, 'lastSun', MAX_YEAR, 3)
        self.assertRaises(
            FieldParseError, resolve_on_day, 'lastSun', 2020, 13)

    def test_resolve_on_day_error_names_field(self) -> None:
        with self.assertRaises(FieldParseError) as context:
            resolve_on_day('Sun>=31', 2020, 4)
        self.assertEqual('ON', context.exception.field)
        self.assertEqual('Sun>=31', context.exception.text)


class TestParseTimeStrings(unittest.TestCase):
    def test_parse_at_time_string(self) -> None:
        self.assertEqual(
            TimeOfDay(120, TimeKind.WALL), parse_at_time_string('2:00'))
        self.assertEqual(
            TimeOfDay(120, TimeKind.WALL), parse_at_time_string('2:00w'))
        self.assertEqual(
            TimeOfDay(720, TimeKind.STANDARD), parse_at_time_string('12:00s'))
        self.assertEqual(
            TimeOfDay(720, TimeKind.UTC), parse_at_time_string('12:00g'))
        self.assertEqual(
            TimeOfDay(720, TimeKind.UTC), parse_at_time_string('12:00u'))
        self.assertEqual(
            TimeOfDay(720, TimeKind.UTC), parse_at_time_string('12:00z'))
        self.assertEqual(
            TimeOfDay(0, TimeKind.WALL), parse_at_time_string('0'))
        self.assertEqual(
            TimeOfDay(1500, TimeKind.WALL), parse_at_time_string('25:00'))
        self.assertEqual(
            TimeOfDay(-30, TimeKind.UTC), parse_at_time_string('-0:30u'))
        self.assertEqual(
            TimeOfDay(61, TimeKind.WALL), parse_at_time_string('1:01:59'))

    def test_parse_at_time_string_fails(self) -> None:
        self.assertRaises(FieldParseError, parse_at_time_string, '2:00p')
        self.assertRaises(FieldParseError, parse_at_time_string, 'two')
        self.assertRaises(FieldParseError, parse_at_time_string, '2:60')
        self.assertRaises(FieldParseError, parse_at_time_string, '')

    def test_parse_offset_string(self) -> None:
        self.assertEqual(-300, parse_offset_string('-5:00'))
        self.assertEqual(345, parse_offset_string('5:45'))
        self.assertEqual(-350, parse_offset_string('-5:50:36'))
        self.assertEqual(0, parse_offset_string('0'))
        self.assertEqual(0, parse_offset_string('-'))
        self.assertRaises(FieldParseError, parse_offset_string, '1:00s')
        self.assertRaises(FieldParseError, parse_offset_string, 'EST')

    def test_parse_save_string(self) -> None:
        self.assertEqual(60, parse_save_string('1:00'))
        self.assertEqual(0, parse_save_string('0'))
        self.assertEqual(0, parse_save_string('-'))
        self.assertEqual(-60, parse_save_string('-1:00'))
        self.assertEqual(30, parse_save_string('0:30'))
        self.assertEqual(60, parse_save_string('1:00d'))
        self.assertRaises(FieldParseError, parse_save_string, '1:00u')


class TestParseMisc(unittest.TestCase):
    def test_parse_letter(self) -> None:
        self.assertIsNone(parse_letter('-'))
        self.assertEqual('D', parse_letter('D'))
        self.assertEqual('CAT', parse_letter('CAT'))

    def test_parse_rules_string(self) -> None:
        self.assertEqual(
            RuleRef(RuleRefKind.NONE), parse_rules_string('-'))
        self.assertEqual(
            RuleRef(RuleRefKind.NAMED, name='US'), parse_rules_string('US'))
        self.assertEqual(
            RuleRef(RuleRefKind.SAVE, save_minutes=60),
            parse_rules_string('1:00'))
        self.assertEqual(
            RuleRef(RuleRefKind.SAVE, save_minutes=-60),
            parse_rules_string('-1:00'))

    def test_parse_format(self) -> None:
        self.assertEqual('E%sT', parse_format('E%sT'))
        self.assertEqual('GMT/BST', parse_format('GMT/BST'))
        self.assertEqual('%z', parse_format('%z'))
        self.assertRaises(FieldParseError, parse_format, 'A/B/C')
        self.assertRaises(FieldParseError, parse_format, 'E%dT')


if __name__ == '__main__':
    unittest.main()
