from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.students.models import Student
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .ledger import SCHEDULE_LENGTH, STATUS_PAID, STATUS_UNPAID
from .services import (
    collection_summary,
    current_reference_month_index,
    set_monthly_payment_status,
    student_collection_rows,
)


def resolve_month_index(request):
    try:
        month = int(request.GET.get('month', ''))
    except ValueError:
        return current_reference_month_index()
    if 0 <= month < SCHEDULE_LENGTH:
        return month
    return current_reference_month_index()


@login_required
@role_required('admin')
@require_POST
def monthly_payment_update(request, student_id, month_index):
    student = get_object_or_404(Student, pk=student_id)
    status = request.POST.get('status')
    if status not in {STATUS_PAID, STATUS_UNPAID}:
        messages.error(request, 'Choose Paid or Unpaid.')
        return redirect('student_detail', pk=student.pk)

    try:
        ledger = set_monthly_payment_status(
            student_id=student.pk,
            month_index=month_index,
            status=status,
        )
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
        return redirect('student_detail', pk=student.pk)

    entry = ledger.schedule[month_index]
    log_audit_event(
        request=request,
        action='fees.monthly_payment_updated',
        target=student,
        details=f"Month={entry.month}, Status={entry.status}",
    )
    messages.success(request, f"{entry.month} marked as {entry.status}.")
    return redirect('student_detail', pk=student.pk)


@login_required
@role_required(['admin', 'guest'])
def collection_report(request):
    month_index = resolve_month_index(request)
    return render(request, 'fees/collection_report.html', {
        'stats': collection_summary(month_index=month_index),
        'rows': student_collection_rows(month_index=month_index),
        'month_index': month_index,
        'month_choices': range(SCHEDULE_LENGTH),
    })
