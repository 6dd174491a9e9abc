import re

# local@domain.tld; each repeated group must start with a separator
EMAIL_RE = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)

MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2

def validate_credentials(email, password, first_name, last_name):
    """Return every problem found, an empty list means the input is usable"""
    errors = []

    if not email or not EMAIL_RE.fullmatch(email):
        errors.append('Invalid email format')

    if len(password or '') < MIN_PASSWORD_LENGTH:
        errors.append(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

    if len(first_name or '') < MIN_NAME_LENGTH:
        errors.append(f'First name must be at least {MIN_NAME_LENGTH} characters')

    if len(last_name or '') < MIN_NAME_LENGTH:
        errors.append(f'Last name must be at least {MIN_NAME_LENGTH} characters')

    return errors
