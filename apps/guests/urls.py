from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'guests'

router = DefaultRouter()
router.register(r'households', views.HouseholdViewSet, basename='household')
router.register(r'guests', views.GuestViewSet, basename='guest')
router.register(r'invitations', views.InvitationViewSet, basename='invitation')

urlpatterns = [
    # Household routes
    # GET    /api/households/?wedding={id}            - List households
    # POST   /api/households/                         - Create household
    # GET/PATCH/DELETE /api/households/{id}/
    # POST   /api/households/merge/                   - Merge duplicate pair
    # POST   /api/households/{id}/generate-token/     - Issue RSVP magic link
    # POST   /api/households/{id}/revoke-token/       - Revoke RSVP magic link
    # GET    /api/households/by-token/{token}/        - Public magic link lookup

    # Guest routes
    # GET    /api/guests/?wedding={id}[&household={id}]
    # POST   /api/guests/                             - Create guest
    # GET/PATCH/DELETE /api/guests/{id}/
    # POST   /api/guests/bulk/                        - Bulk import
    # POST   /api/guests/check-duplicates/            - Check import rows for duplicates

    # Invitation routes
    # GET    /api/invitations/?wedding={id}
    # POST   /api/invitations/
    # PATCH  /api/invitations/{id}/rsvp/
    # DELETE /api/invitations/{id}/

    path('', include(router.urls)),
]
