"""Root URL configuration for the Talking Notes project."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('journal.urls')),
]
