from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET    /api/expenses/                               - List expenses
    # POST   /api/expenses/                               - Create expense (with split)
    # GET    /api/expenses/summary/?plan_id=              - Plan expense summary
    # GET    /api/expenses/{id}/                          - Get expense details
    # PATCH  /api/expenses/{id}/                          - Partial update
    # DELETE /api/expenses/{id}/                          - Delete expense
    # PATCH  /api/expenses/{id}/settle/{participant_id}/  - Settle a share
    path('', include(router.urls)),
]
