from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import StudentApplicationForm, TeacherApplicationForm
from .models import StudentApplication, TeacherApplication
from .services import (
    approve_student_application,
    approve_teacher_application,
    decline_application,
    pending_student_applications,
    pending_teacher_applications,
    submit_application,
)


APPLICATION_KINDS = {
    'student': {
        'model': StudentApplication,
        'form': StudentApplicationForm,
        'title': 'Student Application',
    },
    'teacher': {
        'model': TeacherApplication,
        'form': TeacherApplicationForm,
        'title': 'Teacher Application',
    },
}


def _kind_or_404(kind):
    config = APPLICATION_KINDS.get(kind)
    if config is None:
        raise Http404('Unknown application type.')
    return config


def apply(request, kind):
    config = _kind_or_404(kind)

    if request.method == 'POST':
        form = config['form'](request.POST)
        if form.is_valid():
            try:
                application = submit_application(form.save(commit=False))
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                return render(request, 'admissions/apply_done.html', {
                    'application': application,
                    'kind': kind,
                })
    else:
        form = config['form']()

    return render(request, 'admissions/apply_form.html', {
        'form': form,
        'kind': kind,
        'title': config['title'],
    })


@login_required
@role_required('admin')
def application_list(request):
    return render(request, 'admissions/application_list.html', {
        'student_applications': pending_student_applications(),
        'teacher_applications': pending_teacher_applications(),
    })


@login_required
@role_required('admin')
@require_POST
def application_approve(request, kind, pk):
    _kind_or_404(kind)
    try:
        if kind == 'student':
            record = approve_student_application(application_id=pk, user=request.user)
            code = record.student_code
        else:
            record = approve_teacher_application(application_id=pk, user=request.user)
            code = record.teacher_code
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
        return redirect('application_list')

    log_audit_event(
        request=request,
        action=f"admissions.{kind}_application_approved",
        target=record,
        details=f"ID={code}",
    )
    messages.success(request, f"{record.name} approved and added.")
    return redirect('application_list')


@login_required
@role_required('admin')
@require_POST
def application_decline(request, kind, pk):
    config = _kind_or_404(kind)
    try:
        application = decline_application(model=config['model'], application_id=pk, user=request.user)
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
        return redirect('application_list')

    log_audit_event(
        request=request,
        action=f"admissions.{kind}_application_declined",
        target=application,
        details=f"ApplicationID={application.application_id}",
    )
    messages.success(request, f"Application from {application.name} declined.")
    return redirect('application_list')
