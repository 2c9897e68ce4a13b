from django.urls import path

from works import views

urlpatterns = [
    path('works/<int:work_id>/periods/preview/', views.preview_periods_view, name='preview_work_periods'),
    path('works/<int:work_id>/periods/generate/', views.generate_periods_view, name='generate_work_periods'),
]
