"""
washapp
=======

Django-приложение автомойки: записи клиентов, проверка занятости слотов,
модель календаря, каталог услуг и простая бухгалтерия.
"""
