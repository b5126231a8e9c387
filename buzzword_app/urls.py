from django.urls import include, path
from . import views


urlpatterns = [
    # Vistas principales
    path('', views.board, name='board'),
    path('statistics/', views.statistics, name='statistics'),
    path('statistics/export/', views.export_statistics, name='export_statistics'),
    path('card/export/', views.export_card, name='export_card'),
    path('share/', views.share_result, name='share_result'),
    path('clear/', views.clear_data, name='clear_data'),

    path('phrases/', include([
        path('', views.phrase_manager, name='phrase_manager'),
        path('import/', views.import_phrases, name='import_phrases'),
        path('export/', views.export_phrases, name='export_phrases'),
        path('delete/', views.delete_phrase, name='delete_phrase'),
    ])),

    path('api/', include([
        path('state/', views.state_api, name='state_api'),
        path('intents/<str:intent>/', views.intent_api, name='intent_api'),
    ])),
]
