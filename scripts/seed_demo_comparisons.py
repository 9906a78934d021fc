"""
Seed the comparison tray with a few demo calculations.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from finclamp.calculators import get_calculator
from finclamp.config import get_settings
from finclamp.db.database import get_db_context, init_db
from finclamp.db.models import ComparisonRecord
from finclamp.publishers import build_share_link
from finclamp.state import AddressBar, InputStateStore

DEMO_CALCULATIONS = [
    ("emi", {"loanAmount": "500000", "interestRate": "10", "tenure": "2"}),
    ("mortgage", {"loanAmount": "5000000", "interestRate": "8.5", "tenure": "20"}),
    ("rd", {"monthlyDeposit": "5000", "interestRate": "7", "timePeriod": "5"}),
    ("income-tax", {"annualIncome": "900000", "taxRegime": "new"}),
]


def main():
    init_db()

    with get_db_context() as db:
        existing = db.query(ComparisonRecord).filter(ComparisonRecord.is_deleted == False).count()
        if existing:
            print(f"Comparison tray already has {existing} entries")
            return

        for calculator_id, fields in DEMO_CALCULATIONS:
            schema = get_calculator(calculator_id)
            store = InputStateStore(schema, AddressBar(get_settings().base_url))
            store.update_fields(fields)
            snapshot = store.snapshot()

            db.add(
                ComparisonRecord(
                    calculator_id=calculator_id,
                    title=schema.title,
                    inputs=dict(snapshot.fields),
                    result=dict(snapshot.result),
                    share_url=build_share_link(snapshot),
                )
            )
            print(f"Pinned {schema.title}: {build_share_link(snapshot)}")


if __name__ == "__main__":
    main()
