"""URL configuration for the homestay project.

Routes the Django admin and the API of each domain app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/finances/', include('apps.finances.urls')),
]
