"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_MARKED_BY = "faculty"

ACADEMIC_YEAR_PATTERN = r"^\d{4}-\d{2}$"
YEARS_OF_STUDY = ("1st", "2nd", "3rd")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

REPORT_CSV_HEADERS = ("Date", "Student Name", "Roll Number", "Status", "Marked At")
