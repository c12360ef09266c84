from decimal import Decimal

POINTS_CAP = 10
POINTS_CAP_THRESHOLD = Decimal("1000")
POINTS_UNIT_AMOUNT = Decimal("100")
