from django.urls import path

from .views import MedicineDetailView, MedicineListView, MedicineSearchView

urlpatterns = [
    path('', MedicineListView.as_view(), name='medicine-list'),
    path('search/', MedicineSearchView.as_view(), name='medicine-search'),
    path('<int:pk>/', MedicineDetailView.as_view(), name='medicine-detail'),
]
