from datetime import date

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from works.models import Work
from works.scheduler.errors import RecurrenceError
from works.tasks.period_generation import generate_periods_and_tasks, preview_periods

MAX_PREVIEW_COUNT = 24


def _reference_date(source):
    value = source.get('reference_date')
    if not value:
        return timezone.localdate()
    return date.fromisoformat(value)


@login_required
@require_GET
def preview_periods_view(request, work_id):
    work = get_object_or_404(Work.objects.prefetch_related('task_templates'), id=work_id)

    try:
        reference_date = _reference_date(request.GET)
        count = int(request.GET.get('count', getattr(settings, 'RECURRING_WORK_PREVIEW_COUNT', 6)))
    except ValueError:
        return JsonResponse({'kind': 'InvalidRequest', 'message': 'Invalid reference_date or count.'}, status=400)
    count = max(1, min(count, MAX_PREVIEW_COUNT))

    try:
        plans = preview_periods(work.to_recurring_work(), reference_date, count)
    except RecurrenceError as exc:
        return JsonResponse(exc.as_dict(), status=400)

    return JsonResponse({
        'work_id': work.id,
        'reference_date': reference_date.isoformat(),
        'periods': [plan.as_dict() for plan in plans],
    })


@login_required
@require_POST
def generate_periods_view(request, work_id):
    work = get_object_or_404(Work, id=work_id)

    try:
        reference_date = _reference_date(request.POST)
    except ValueError:
        return JsonResponse({'kind': 'InvalidRequest', 'message': 'Invalid reference_date.'}, status=400)

    try:
        result = generate_periods_and_tasks(work.id, reference_date)
    except RecurrenceError as exc:
        return JsonResponse(exc.as_dict(), status=400)

    if result.error:
        return JsonResponse(result.as_dict(), status=503)
    return JsonResponse(result.as_dict(), status=201 if result.created is not None else 200)
