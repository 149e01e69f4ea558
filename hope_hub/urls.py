from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', auth_views.LoginView.as_view(template_name='registration/login.html', redirect_authenticated_user=True), name='home'),
    path('login/', auth_views.LoginView.as_view(template_name='registration/login.html', redirect_authenticated_user=True), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),

    path('', include('apps.core.users.urls')),
    path('', include('apps.core.admissions.urls')),
    path('students/', include('apps.core.students.urls')),
    path('teachers/', include('apps.core.teachers.urls')),
    path('fees/', include('apps.core.fees.urls')),
]
