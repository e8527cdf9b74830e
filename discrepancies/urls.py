from rest_framework.routers import DefaultRouter

from .views import DiscrepancyViewSet

router = DefaultRouter()
router.register(r'discrepancies', DiscrepancyViewSet, basename='discrepancy')

urlpatterns = router.urls
