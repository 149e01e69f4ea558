from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.fees.ledger import FeeLedgerError
from apps.core.fees.repositories import DjangoLedgerRepository
from apps.core.fees.services import current_reference_month_index
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import StudentForm
from .models import Student
from .services import delete_student, register_student, search_students, update_student


@login_required
@role_required(['admin', 'guest'])
def student_list(request):
    search = (request.GET.get('q') or '').strip()
    return render(request, 'students/student_list.html', {
        'students': search_students(search),
        'search_query': search,
    })


@login_required
@role_required(['admin', 'guest'])
def student_detail(request, pk):
    student = get_object_or_404(Student, pk=pk)
    try:
        ledger = DjangoLedgerRepository().get(student.pk)
    except FeeLedgerError as exc:
        messages.error(request, ' '.join(exc.messages))
        ledger = None
    return render(request, 'students/student_detail.html', {
        'student': student,
        'ledger': ledger,
        'schedule': list(enumerate(ledger.schedule or ())) if ledger else [],
        'reference_month_index': current_reference_month_index(),
    })


@login_required
@role_required('admin')
def student_create(request):
    if request.method == 'POST':
        form = StudentForm(request.POST)
        if form.is_valid():
            try:
                student = register_student(form.save(commit=False))
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='students.student_created',
                    target=student,
                    details=f"StudentID={student.student_code}, Plan={student.payment_type}",
                )
                messages.success(request, 'Student added successfully.')
                return redirect('student_detail', pk=student.pk)
    else:
        form = StudentForm()

    return render(request, 'students/student_form.html', {'form': form})


@login_required
@role_required('admin')
def student_update(request, pk):
    student = get_object_or_404(Student, pk=pk)

    if request.method == 'POST':
        form = StudentForm(request.POST, instance=student)
        if form.is_valid():
            try:
                student = update_student(form.save(commit=False))
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='students.student_updated',
                    target=student,
                    details=f"StudentID={student.student_code}",
                )
                messages.success(request, 'Student profile updated successfully.')
                return redirect('student_detail', pk=student.pk)
    else:
        form = StudentForm(instance=student)

    return render(request, 'students/student_form.html', {
        'form': form,
        'student': student,
    })


@login_required
@role_required('admin')
@require_POST
def student_delete(request, pk):
    student = get_object_or_404(Student, pk=pk)
    log_audit_event(
        request=request,
        action='students.student_deleted',
        target=student,
        details=f"StudentID={student.student_code}, Name={student.name}",
    )
    delete_student(student)
    messages.success(request, 'Student deleted.')
    return redirect('student_list')
