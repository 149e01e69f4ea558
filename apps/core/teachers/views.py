from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import TeacherForm
from .models import Teacher
from .services import register_teacher, search_teachers


@login_required
@role_required(['admin', 'guest'])
def teacher_list(request):
    search = (request.GET.get('q') or '').strip()
    return render(request, 'teachers/teacher_list.html', {
        'teachers': search_teachers(search),
        'search_query': search,
    })


@login_required
@role_required(['admin', 'guest'])
def teacher_detail(request, pk):
    teacher = get_object_or_404(Teacher, pk=pk)
    return render(request, 'teachers/teacher_detail.html', {'teacher': teacher})


@login_required
@role_required('admin')
def teacher_create(request):
    if request.method == 'POST':
        form = TeacherForm(request.POST)
        if form.is_valid():
            try:
                teacher = register_teacher(form.save(commit=False))
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='teachers.teacher_created',
                    target=teacher,
                    details=f"TeacherID={teacher.teacher_code}",
                )
                messages.success(request, 'Teacher added successfully.')
                return redirect('teacher_list')
    else:
        form = TeacherForm()

    return render(request, 'teachers/teacher_form.html', {'form': form})


@login_required
@role_required('admin')
def teacher_update(request, pk):
    teacher = get_object_or_404(Teacher, pk=pk)

    if request.method == 'POST':
        form = TeacherForm(request.POST, instance=teacher)
        if form.is_valid():
            teacher = form.save()
            log_audit_event(
                request=request,
                action='teachers.teacher_updated',
                target=teacher,
                details=f"TeacherID={teacher.teacher_code}",
            )
            messages.success(request, 'Teacher profile updated successfully.')
            return redirect('teacher_detail', pk=teacher.pk)
    else:
        form = TeacherForm(instance=teacher)

    return render(request, 'teachers/teacher_form.html', {
        'form': form,
        'teacher': teacher,
    })


@login_required
@role_required('admin')
@require_POST
def teacher_delete(request, pk):
    teacher = get_object_or_404(Teacher, pk=pk)
    log_audit_event(
        request=request,
        action='teachers.teacher_deleted',
        target=teacher,
        details=f"TeacherID={teacher.teacher_code}, Name={teacher.name}",
    )
    teacher.delete()
    messages.success(request, 'Teacher deleted.')
    return redirect('teacher_list')
