from django.contrib import admin, messages
from django.utils.html import format_html

from .models import (
    Work,
    WorkTaskTemplate,
    WorkPeriodInstance,
    TaskInstance,
)
from .scheduler.errors import RecurrenceError


class WorkTaskTemplateInline(admin.TabularInline):
    model = WorkTaskTemplate
    extra = 0
    fields = (
        "title",
        "priority",
        "sort_order",
        "is_active",
        "start_date",
        "assigned_to",
        "task_frequency",
        "weekday",
        "start_day",
        "start_month",
        "due_offset_type",
        "due_offset_value",
        "due_anchor",
        "exact_due_date",
    )


@admin.register(Work)
class WorkAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "client_name",
        "frequency",
        "framing_policy",
        "effective_start_date",
        "effective_end_date",
        "assigned_to",
        "is_active",
    )
    list_filter = ("frequency", "framing_policy", "is_active", "assigned_to")
    search_fields = ("title", "client_name")
    date_hierarchy = "effective_start_date"
    inlines = (WorkTaskTemplateInline,)
    actions = ("generate_current_periods",)

    @admin.action(description="Generate periods for selected works")
    def generate_current_periods(self, request, queryset):
        from .tasks.period_generation import generate_periods_and_tasks

        for work in queryset:
            try:
                result = generate_periods_and_tasks(work.id)
            except RecurrenceError as exc:
                messages.warning(request, f"{work}: {exc.message}")
                continue
            if result.error:
                messages.error(request, f"{work}: {result.error['message']}")
            elif result.created is not None:
                messages.success(request, f"{work}: created {result.created.period_name}")
            else:
                messages.info(request, f"{work}: period already exists")


class TaskInstanceInline(admin.TabularInline):
    model = TaskInstance
    extra = 0
    fields = ("title", "window_start", "window_end", "due_date", "status", "assigned_to")
    readonly_fields = ("title", "window_start", "window_end", "due_date", "status")


@admin.register(WorkPeriodInstance)
class WorkPeriodInstanceAdmin(admin.ModelAdmin):
    list_display = (
        "work",
        "period_name",
        "period_start",
        "period_end",
        "due_date",
        "status",
        "is_overdue_flag",
    )
    list_filter = ("status", "work__frequency", "due_date")
    search_fields = ("work__title", "work__client_name", "period_name")
    date_hierarchy = "period_start"
    readonly_fields = ("work", "period_name", "period_start", "period_end", "due_date", "status")
    inlines = (TaskInstanceInline,)

    def is_overdue_flag(self, obj):
        color = "red" if obj.is_overdue else "green"
        text = "Yes" if obj.is_overdue else "No"
        return format_html('<span style="color:{};">{}</span>', color, text)

    is_overdue_flag.short_description = "Overdue"


@admin.register(TaskInstance)
class TaskInstanceAdmin(admin.ModelAdmin):
    list_display = ("title", "period_instance", "due_date", "status", "priority", "assigned_to")
    list_filter = ("status", "priority", "assigned_to", "due_date")
    search_fields = ("title", "period_instance__work__title", "period_instance__period_name")
    readonly_fields = ("period_instance", "template", "window_start", "window_end", "due_date", "status")
