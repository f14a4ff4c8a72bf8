from django.core.management.base import BaseCommand

from inventory.services import StockDeductionEngine


class Command(BaseCommand):
    help = 'Finish stock deduction for sales left pending or failed.'

    def add_arguments(self, parser):
        parser.add_argument('--limit', type=int, default=None, help='Process at most this many sales.')

    def handle(self, *args, **options):
        outcomes = StockDeductionEngine().resume_outstanding(limit=options['limit'])
        failed = 0
        for outcome in outcomes:
            if outcome['status'] == 'failed':
                failed += 1
                self.stdout.write(self.style.ERROR(f"Sale {outcome['sale_id']}: {outcome['error']}"))
            else:
                self.stdout.write(f"Sale {outcome['sale_id']}: {outcome['status']}")
        self.stdout.write(f"Done. Processed {len(outcomes)} sale(s), {failed} failed.")
