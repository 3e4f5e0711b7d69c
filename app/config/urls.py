"""
URL configuration for the finance project.

URL Structure:
    /admin/  - Django admin (companies, accounts, documents, ledger entries)
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path("admin/", admin.site.urls),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Travel Finance Admin"
admin.site.site_title = "Finance Admin"
admin.site.index_title = "Accounts & Documents"
