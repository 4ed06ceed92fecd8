from django.urls import path
from .views import CategoryListView, GigDetailView, GigListCreateView, MyGigsView

urlpatterns = [
    path("categories/", CategoryListView.as_view(), name="categories"),
    path("gigs/", GigListCreateView.as_view(), name="gig-list"),
    path("gigs/mine/", MyGigsView.as_view(), name="my-gigs"),
    path("gigs/<int:gig_id>/", GigDetailView.as_view(), name="gig-detail"),
]
