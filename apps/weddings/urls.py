from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'weddings'

router = DefaultRouter()
router.register(r'weddings', views.WeddingViewSet, basename='wedding')
router.register(r'events', views.EventViewSet, basename='event')

urlpatterns = [
    # Wedding ViewSet routes
    # GET    /api/weddings/              - List user's weddings
    # POST   /api/weddings/              - Create wedding
    # GET    /api/weddings/{id}/         - Get wedding details
    # PUT    /api/weddings/{id}/         - Update wedding (owner/planner)
    # PATCH  /api/weddings/{id}/         - Partial update (owner/planner)
    # DELETE /api/weddings/{id}/         - Delete wedding (owner)

    # Custom wedding actions
    # GET    /api/weddings/{id}/collaborators/           - List collaborators
    # POST   /api/weddings/{id}/collaborators/           - Add collaborator by email
    # DELETE /api/weddings/{id}/remove_collaborator/     - Remove collaborator
    # GET    /api/weddings/{id}/duplicate-households/    - Duplicate review queue

    # Event ViewSet routes
    # GET    /api/events/?wedding={id}   - List events of a wedding
    # POST   /api/events/                - Create event
    # GET/PATCH/DELETE /api/events/{id}/

    path('', include(router.urls)),
]
