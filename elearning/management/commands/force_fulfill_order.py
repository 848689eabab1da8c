from django.core.management.base import BaseCommand, CommandError

from core.payments.exceptions import CheckoutError
from core.payments.gateways import get_payment_gateway
from elearning.orders.fulfillment import FulfillmentEngine, OrderRef


class Command(BaseCommand):
    help = 'Complete an order and grant its enrollments (admin override for lost webhooks)'

    def add_arguments(self, parser):
        parser.add_argument('order_id', nargs='?', type=int, help='Primary key of the order')
        parser.add_argument('--session', dest='session_id', help='Gateway checkout session id instead of an order id')
        parser.add_argument(
            '--no-verify',
            action='store_true',
            help='Do not ask the payment gateway whether the session was paid',
        )

    def handle(self, *args, **options):
        order_id = options.get('order_id')
        session_id = options.get('session_id')
        if (order_id is None) == (session_id is None):
            raise CommandError('Pass either an order id or --session <session_id>.')

        ref = OrderRef(order_id=order_id) if order_id is not None else OrderRef(session_id=session_id)
        engine = FulfillmentEngine(get_payment_gateway())

        self.stdout.write(f'Fulfilling {ref}...')
        try:
            outcome = engine.force_fulfill(ref, verify_payment=not options['no_verify'])
        except CheckoutError as exc:
            raise CommandError(f'{exc.error_code}: {exc.message}')

        if outcome.already_processed:
            self.stdout.write(
                self.style.WARNING(f'Order #{outcome.order.pk} is already {outcome.order.status}, nothing changed')
            )
            return

        for enrollment in outcome.enrollments_created:
            self.stdout.write(f'Enrolled user {enrollment.user_id} in "{enrollment.course.title}"')
        for course_id in outcome.enrollments_skipped:
            self.stdout.write(f'User already enrolled in course {course_id}, skipped')

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully fulfilled order #{outcome.order.pk} '
                f'({len(outcome.enrollments_created)} enrollments created)'
            )
        )
